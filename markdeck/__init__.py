"""
Markdeck - Markdown slide decks as HTML presentations

A small toolkit for turning Markdown slide files into HTML slide shows,
with support for:
- Presenter note and fragment stripping
- Relative path rebasing
- Inlining of images, fonts, scripts and stylesheets as data URIs
- Extraction of embedded images back into files
"""

__version__ = "0.1.0"

from markdeck.core.models import (
    ConfigurationError,
    ExportResult,
    FatalIoError,
    MalformedInputError,
    MarkdeckError,
    Reference,
    ResourceResolutionError,
    TransformOptions,
)
from markdeck.core.scanner import ContentKind, ReferenceScanner
from markdeck.core.inliner import ResourceInliner
from markdeck.core.pipeline import TransformPipeline
from markdeck.core.exporter import Exporter
from markdeck.core.rewriter import SlideRewriter
from markdeck.transforms.images import ImageExtractor
from markdeck.transforms.paths import PathRebaser

__all__ = [
    "ConfigurationError",
    "ExportResult",
    "FatalIoError",
    "MalformedInputError",
    "MarkdeckError",
    "Reference",
    "ResourceResolutionError",
    "TransformOptions",
    "ContentKind",
    "ReferenceScanner",
    "ResourceInliner",
    "TransformPipeline",
    "Exporter",
    "SlideRewriter",
    "ImageExtractor",
    "PathRebaser",
]
