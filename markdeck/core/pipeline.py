"""Transform pipeline applying the slide passes in order."""

from pathlib import Path
from typing import Optional, Set

from markdeck.core.inliner import Fetch, ReadBytes, ResourceInliner
from markdeck.core.models import Reference, ResourceResolutionError, TransformOptions
from markdeck.core.scanner import ContentKind, Grammar, ReferenceScanner, Syntax, syntaxes_for
from markdeck.transforms.paths import PathRebaser
from markdeck.transforms.slides import strip_fragments, strip_notes


class TransformPipeline:
    """Rewrites Markdown, HTML or CSS content according to TransformOptions.

    Passes, each enabled by an option:
    1. strip presenter notes (Markdown only)
    2. strip fragment markers (Markdown only)
    3. rebase relative references to ``file://`` URLs
    4. inline ``file://`` references as data URIs (HTML and CSS content:
       ``http(s)://`` resources as well)
    5. embed Markdown images, remote ones included

    Inlining needs resolvable targets, so ``inline`` also turns on rebasing.
    """

    def __init__(
        self,
        options: TransformOptions,
        read_bytes: Optional[ReadBytes] = None,
        fetch: Optional[Fetch] = None,
    ):
        """Initialize TransformPipeline.

        Args:
            options: Passes to apply and default base directory
            read_bytes: Local file reader handed to each ResourceInliner
            fetch: HTTP GET handed to each ResourceInliner
        """
        self.options = options
        self.read_bytes = read_bytes
        self.fetch = fetch

    def transform(
        self,
        content: str,
        kind: ContentKind = ContentKind.MARKDOWN,
        base_dir: Optional[Path] = None,
    ) -> str:
        """Apply the enabled passes to content.

        Args:
            content: Text to transform
            kind: Content type, selects the reference grammars
            base_dir: Directory relative references resolve against
                      (default: options.base_dir, then the working directory)

        Returns:
            Transformed content
        """
        options = self.options
        base_dir = Path(base_dir or options.base_dir or Path.cwd())
        syntaxes = syntaxes_for(kind, options.inline_embedded_markup)

        if kind is ContentKind.MARKDOWN:
            if options.strip_notes:
                content = strip_notes(content)
            if options.strip_fragments:
                content = strip_fragments(content)

        if options.fix_relative_paths or options.inline:
            content = PathRebaser(base_dir, syntaxes).rebase(content)

        if not (options.inline or options.embed_images):
            return content

        # One cache per call: a resource referenced twice is read once
        inliner = ResourceInliner(base_dir, read_bytes=self.read_bytes, fetch=self.fetch)
        if options.inline:
            # Page shells and stylesheets pull in remote scripts, styles and fonts too
            grammar = Grammar.FILE if kind is ContentKind.MARKDOWN else Grammar.RESOURCE
            content = self._inline(content, ReferenceScanner(grammar, syntaxes), inliner)
        if options.embed_images and kind is ContentKind.MARKDOWN:
            content = self._inline(
                content, ReferenceScanner(Grammar.EMBEDDABLE, [Syntax.MARKDOWN]), inliner
            )
        return content

    def _inline(self, content: str, scanner: ReferenceScanner, inliner: ResourceInliner) -> str:
        """Replace each matched reference target with its data URI.

        Only exact reference targets are rewritten, so an unresolvable target
        keeps its text even when a shorter resolvable target is a prefix of
        it. Repeated targets share one cached lookup and one warning.
        """
        unresolved: Set[str] = set()

        def rewrite(reference: Reference) -> Optional[str]:
            try:
                return inliner.data_uri(reference.target)
            except ResourceResolutionError as e:
                if reference.target not in unresolved:
                    unresolved.add(reference.target)
                    print(f"Warning: {e}")
                return None

        return scanner.replace(content, rewrite)
