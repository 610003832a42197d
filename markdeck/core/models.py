"""Data models and errors for Markdeck."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class MarkdeckError(Exception):
    """Base class for all Markdeck errors."""


class ConfigurationError(MarkdeckError):
    """Template, config file or input selection is unusable. Fatal."""


class ResourceResolutionError(MarkdeckError):
    """A single referenced resource could not be read or fetched."""

    def __init__(self, locator: str, reason: str):
        super().__init__(f"Cannot resolve {locator}: {reason}")
        self.locator = locator
        self.reason = reason


class InvalidInputError(MarkdeckError, ValueError):
    """Missing data or MIME type when building a data URI."""


class MalformedInputError(MarkdeckError, ValueError):
    """A string does not have the shape of a base64 data URI."""


class FatalIoError(MarkdeckError):
    """A slide, template or output file could not be read or written."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"I/O error on {path}: {reason}")
        self.path = path


class ReferenceKind(Enum):
    MARKDOWN_IMAGE = "markdown-image"
    MARKDOWN_LINK = "markdown-link"
    HTML_ATTRIBUTE = "html-attribute"
    CSS_URL = "css-url"


@dataclass(frozen=True)
class Reference:
    """A resource reference located in a piece of content.

    ``prefix + target + suffix == full_match`` always holds.
    """
    full_match: str
    prefix: str
    target: str
    suffix: str
    kind: ReferenceKind
    start: int = 0

    @property
    def label(self) -> str:
        """Bracketed text of a Markdown reference (alt text for images)."""
        if self.kind not in (ReferenceKind.MARKDOWN_IMAGE, ReferenceKind.MARKDOWN_LINK):
            return ""
        text = self.prefix.lstrip('!')
        return text[1:-2]


@dataclass(frozen=True)
class ResolvedResource:
    """Bytes fetched for a reference target."""
    source_locator: str
    mime_type: str
    data: bytes


@dataclass(frozen=True)
class TransformOptions:
    """Which passes the pipeline applies. Immutable per invocation."""
    strip_notes: bool = False
    strip_fragments: bool = False
    fix_relative_paths: bool = False
    inline: bool = False
    embed_images: bool = False
    base_dir: Optional[Path] = None
    inline_embedded_markup: bool = True


@dataclass
class FileError:
    """An error that occurred while exporting or transforming one file."""
    path: Path
    error: str


@dataclass
class ExportResult:
    """Result of a batch export or transform."""
    exported_files: List[Path] = field(default_factory=list)
    failures: List[FileError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
