"""Extraction of embedded data URI images into files."""

import itertools
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set

import inflection

from markdeck.core import datauri
from markdeck.core.models import FatalIoError, MalformedInputError, Reference
from markdeck.core.scanner import Grammar, ReferenceScanner, Syntax


class ImageExtractor:
    """Writes data URI images found in Markdown to files.

    Each image is named after its alt text (slugified) or, when there is
    none, after the next value of a counter. The counter belongs to the
    caller: pass the same one to several ``extract`` calls to keep names
    unique across a run.
    """

    def __init__(self, output_dir: Path, link_prefix: str = "images"):
        """Initialize ImageExtractor.

        Args:
            output_dir: Directory image files are written to
            link_prefix: Path prefix used in rewritten references
        """
        self.output_dir = Path(output_dir)
        self.link_prefix = link_prefix.rstrip('/')
        self.scanner = ReferenceScanner(Grammar.DATA, [Syntax.MARKDOWN])
        self.written: List[Path] = []
        self.links: Set[str] = set()

    def extract(self, content: str, counter: Optional[Iterator[int]] = None) -> str:
        """Externalize every data URI image in content.

        Args:
            content: Markdown content
            counter: Source of names for images without alt text
                     (default: a fresh counter starting at 1)

        Returns:
            Content with image targets pointing to the extracted files

        Raises:
            FatalIoError: if an image file cannot be written
        """
        counter = counter if counter is not None else itertools.count(1)
        extracted: Dict[str, str] = {}

        def rewrite(reference: Reference) -> Optional[str]:
            if reference.target in extracted:
                return extracted[reference.target]
            try:
                image = datauri.decode(reference.target)
            except MalformedInputError as e:
                print(f"Warning: Skipping embedded image: {e}")
                return None

            stem = inflection.parameterize(reference.label) or str(next(counter))
            path = self._write(stem, image)
            link = f"{self.link_prefix}/{path.name}"
            extracted[reference.target] = link
            self.links.add(link)
            return link

        return self.scanner.replace(content, rewrite)

    def _write(self, stem: str, image: datauri.DataUri) -> Path:
        path = self._available_path(stem, image.extension, image.data)
        if path.is_file():
            return path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(image.data)
        except OSError as e:
            raise FatalIoError(path, e.strerror or str(e)) from e
        self.written.append(path)
        return path

    def _available_path(self, stem: str, extension: str, data: bytes) -> Path:
        """First free path for stem, reusing a file that already holds the same bytes.

        Anything else in the way, a directory included, moves on to the next suffix.
        """
        n = 1
        path = self.output_dir / f"{stem}.{extension}"
        try:
            while path.exists() and not (path.is_file() and path.read_bytes() == data):
                n += 1
                path = self.output_dir / f"{stem}-{n}.{extension}"
        except OSError as e:
            raise FatalIoError(path, e.strerror or str(e)) from e
        return path
