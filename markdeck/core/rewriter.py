"""In-place or side-by-side rewriting of Markdown slide files."""

import itertools
from pathlib import Path
from typing import Iterator, Optional, Sequence, Set

from markdeck.core.inliner import Fetch, ReadBytes
from markdeck.core.models import ExportResult, FatalIoError, FileError, TransformOptions
from markdeck.core.pipeline import TransformPipeline
from markdeck.core.scanner import ContentKind, syntaxes_for
from markdeck.transforms.images import ImageExtractor
from markdeck.transforms.paths import PathRebaser


class SlideRewriter:
    """Applies Markdown-to-Markdown transformations to slide files.

    Handles:
    - Presenter note and fragment stripping
    - Embedding of referenced images as data URIs
    - Extraction of embedded images into an image directory
    """

    def __init__(
        self,
        options: TransformOptions,
        extract_images_dir: Optional[str] = None,
        read_bytes: Optional[ReadBytes] = None,
        fetch: Optional[Fetch] = None,
    ):
        """Initialize SlideRewriter.

        Args:
            options: Pipeline options (strip_notes, strip_fragments, embed_images)
            extract_images_dir: Image directory, relative to the output
                                directory; None disables extraction
            read_bytes: Local file reader used when embedding
            fetch: HTTP GET used when embedding remote images
        """
        self.options = options
        self.extract_images_dir = extract_images_dir
        self.pipeline = TransformPipeline(options, read_bytes=read_bytes, fetch=fetch)

    def transform_all(
        self,
        files: Sequence[Path],
        output_dir: Optional[Path] = None,
        stop_on_error: bool = True,
    ) -> ExportResult:
        """Transform files one at a time, in order.

        Args:
            files: Markdown files
            output_dir: Destination directory; files are rewritten in place if None
            stop_on_error: Re-raise the first FatalIoError

        Returns:
            ExportResult listing written files and failures
        """
        result = ExportResult()
        counter = itertools.count(1)
        total = len(files)

        for count, file in enumerate(files, 1):
            file = Path(file)
            print(f"Transforming slides {count}/{total}: {file.name}")
            try:
                result.exported_files.append(self.transform_file(file, output_dir, counter))
            except FatalIoError as e:
                print(f"Error: Failed to transform {file.name}: {e}")
                if stop_on_error:
                    raise
                result.failures.append(FileError(path=file, error=str(e)))

        return result

    def transform_file(
        self,
        file: Path,
        output_dir: Optional[Path] = None,
        counter: Optional[Iterator[int]] = None,
    ) -> Path:
        """Transform a single file.

        Args:
            file: Markdown file
            output_dir: Destination directory (default: the file's directory)
            counter: Name counter for extracted images without alt text

        Returns:
            Path of the written file

        Raises:
            FatalIoError: if the file cannot be read or the result written
        """
        file = Path(file)
        source_dir = file.resolve().parent
        output_dir = Path(output_dir) if output_dir else file.parent
        destination = output_dir / file.name

        try:
            md = file.read_text(encoding='utf-8')
        except OSError as e:
            raise FatalIoError(file, e.strerror or str(e)) from e

        md = self.pipeline.transform(md, ContentKind.MARKDOWN, base_dir=source_dir)

        extracted: Set[str] = set()
        if self.extract_images_dir:
            extractor = ImageExtractor(
                output_dir / self.extract_images_dir,
                link_prefix=Path(self.extract_images_dir).as_posix(),
            )
            md = extractor.extract(md, counter)
            extracted = extractor.links

        if output_dir.resolve() != source_dir:
            # Keep relative references pointing at the original files;
            # extracted images already live next to the output file
            syntaxes = syntaxes_for(ContentKind.MARKDOWN, self.options.inline_embedded_markup)
            rebaser = PathRebaser(source_dir, syntaxes, relative_to=output_dir)
            md = rebaser.rebase(md, keep=lambda reference: reference.target in extracted)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(md, encoding='utf-8')
        except OSError as e:
            raise FatalIoError(destination, e.strerror or str(e)) from e
        return destination
