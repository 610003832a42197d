"""Core components for Markdeck."""

from markdeck.core.models import (
    ConfigurationError,
    ExportResult,
    FatalIoError,
    FileError,
    InvalidInputError,
    MalformedInputError,
    MarkdeckError,
    Reference,
    ReferenceKind,
    ResolvedResource,
    ResourceResolutionError,
    TransformOptions,
)
from markdeck.core.scanner import ContentKind, Grammar, ReferenceScanner, Syntax
from markdeck.core.inliner import ResourceInliner
from markdeck.core.pipeline import TransformPipeline
from markdeck.core.exporter import Exporter
from markdeck.core.rewriter import SlideRewriter
from markdeck.core.config import MarkdeckConfig

__all__ = [
    "ConfigurationError",
    "ExportResult",
    "FatalIoError",
    "FileError",
    "InvalidInputError",
    "MalformedInputError",
    "MarkdeckError",
    "Reference",
    "ReferenceKind",
    "ResolvedResource",
    "ResourceResolutionError",
    "TransformOptions",
    "ContentKind",
    "Grammar",
    "ReferenceScanner",
    "Syntax",
    "ResourceInliner",
    "TransformPipeline",
    "Exporter",
    "SlideRewriter",
    "MarkdeckConfig",
]
