"""HTML export of Markdown slides."""

import json
from pathlib import Path
from typing import Callable, Optional, Sequence

from jinja2 import Environment

from markdeck.core.inliner import Fetch, ReadBytes
from markdeck.core.models import (
    ConfigurationError,
    ExportResult,
    FatalIoError,
    FileError,
    TransformOptions,
)
from markdeck.core.pipeline import TransformPipeline
from markdeck.core.scanner import ContentKind
from markdeck.core.stylesheet import SASS_TEMPLATE, compile_stylesheet
from markdeck.transforms.slides import fallback_title, get_title

HTML_TEMPLATE = "index.html"
STYLESHEET = "style.css"

StyleCompiler = Callable[[Path], str]


def check_template(template_dir: Path) -> None:
    """Make sure the template directory holds an HTML shell and a stylesheet.

    Raises:
        ConfigurationError: if either file is missing
    """
    template_dir = Path(template_dir)
    for name in (HTML_TEMPLATE, SASS_TEMPLATE):
        if not (template_dir / name).exists():
            raise ConfigurationError(f"{template_dir / name} not found")


def render_template(html: str, source: str, style: str, title: str) -> str:
    """Fill the HTML shell placeholders."""
    env = Environment(autoescape=False, keep_trailing_newline=True)
    return env.from_string(html).render(source=source, style=style, title=title)


def _source_property(md: str) -> str:
    # "</" is escaped so slide content cannot close the enclosing <script>
    return "source: " + json.dumps(md).replace("</", "<\\/")


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding='utf-8')
    except OSError as e:
        raise FatalIoError(path, e.strerror or str(e)) from e


def _write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')
    except OSError as e:
        raise FatalIoError(path, e.strerror or str(e)) from e


class Exporter:
    """Exports Markdown slide files as HTML presentations.

    Output is either self-contained (``inline``: every resource embedded as a
    data URI) or refers to its resources by absolute ``file://`` URLs, with
    the CSS embedded in a ``<style>`` element or, for website bundles,
    written next to the pages as ``style.css``.
    """

    def __init__(
        self,
        template_dir: Path,
        options: TransformOptions,
        separate_stylesheet: bool = False,
        style_compiler: Optional[StyleCompiler] = None,
        read_bytes: Optional[ReadBytes] = None,
        fetch: Optional[Fetch] = None,
    ):
        """Initialize Exporter.

        Args:
            template_dir: Directory holding index.html and style.scss
            options: Pipeline options applied to each slide file
            separate_stylesheet: Write style.css instead of embedding it
                                 (ignored when inlining)
            style_compiler: Turns the template directory into CSS text
            read_bytes: Local file reader used when inlining
            fetch: HTTP GET used when inlining remote images
        """
        self.template_dir = Path(template_dir)
        self.options = options
        self.separate_stylesheet = separate_stylesheet and not options.inline
        self.style_compiler = style_compiler or compile_stylesheet
        self.pipeline = TransformPipeline(options, read_bytes=read_bytes, fetch=fetch)
        self._css: Optional[str] = None

    def export_all(
        self,
        files: Sequence[Path],
        output_dir: Path,
        stop_on_error: bool = True,
    ) -> ExportResult:
        """Export files one at a time, in order.

        Args:
            files: Markdown files to export
            output_dir: Directory HTML files are written to
            stop_on_error: Re-raise the first FatalIoError instead of
                           recording it and moving to the next file

        Returns:
            ExportResult listing exported files and failures

        Raises:
            ConfigurationError: if the template is incomplete, before any
                                file is processed
        """
        check_template(self.template_dir)
        result = ExportResult()
        total = len(files)

        for count, file in enumerate(files, 1):
            file = Path(file)
            print(f"Exporting file {count}/{total}: {file.name}")
            try:
                result.exported_files.append(self.export_file(file, output_dir))
            except FatalIoError as e:
                print(f"Error: Failed to export {file.name}: {e}")
                if stop_on_error:
                    raise
                result.failures.append(FileError(path=file, error=str(e)))

        return result

    def export_file(self, file: Path, output_dir: Path) -> Path:
        """Export a single Markdown file.

        Returns:
            Path of the written HTML file

        Raises:
            FatalIoError: if the slide, the shell or the output cannot be accessed
        """
        file = Path(file)
        output_dir = Path(output_dir)
        exported_file = output_dir / f"{file.stem}.html"

        md = _read_text(file)
        md = self.pipeline.transform(md, ContentKind.MARKDOWN, base_dir=file.resolve().parent)

        html = _read_text(self.template_dir / HTML_TEMPLATE)
        css = self._stylesheet()
        if self.options.fix_relative_paths or self.options.inline:
            html = self.pipeline.transform(html, ContentKind.HTML, base_dir=self.template_dir)
            css = self.pipeline.transform(css, ContentKind.CSS, base_dir=self.template_dir)

        if self.separate_stylesheet:
            _write_text(output_dir / STYLESHEET, css)
            style = f'<link rel="stylesheet" href="{STYLESHEET}">'
        else:
            style = f"<style>\n{css}\n</style>"

        page = render_template(
            html,
            source=_source_property(md),
            style=style,
            title=get_title(md) or fallback_title(file),
        )
        _write_text(exported_file, page)
        return exported_file

    def _stylesheet(self) -> str:
        if self._css is None:
            self._css = self.style_compiler(self.template_dir)
        return self._css
