"""Reference scanning for Markdown, HTML and CSS content.

Each content syntax has its own reference grammar. Patterns live in a single
table keyed by (Grammar, Syntax) and every pattern exposes the same three
groups: prefix, target and suffix. One driver scans or rewrites content with
whichever patterns apply, so the passes built on top never loop over regexes
themselves.
"""

import re
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from markdeck.core.models import Reference, ReferenceKind


class ContentKind(Enum):
    MARKDOWN = "markdown"
    HTML = "html"
    CSS = "css"


class Syntax(Enum):
    MARKDOWN = "markdown"
    HTML = "html"
    CSS = "css"


class Grammar(Enum):
    """Which targets a scan is interested in."""
    RELATIVE = "relative"
    FILE = "file"
    RESOURCE = "resource"
    EMBEDDABLE = "embeddable"
    DATA = "data"


# Absolute paths, in-page anchors and anything carrying a URL scheme
# (data:, http://, https://, file://, mailto:) are never relative.
_NOT_RELATIVE = r'(?!/|#|[A-Za-z][A-Za-z0-9+.-]*:)'

_HTML_TAG = r'(<(?:img|link|script|a)\b[^>]*?\s(?:src|href)=["\'])'
_HTML_RESOURCE_TAG = r'(<(?:img|link|script)\b[^>]*?\s(?:src|href)=["\'])'
_CSS_URL = r'(url\(\s*["\']?)'
_CSS_END = r'(["\']?\s*\))'

GRAMMARS: Dict[Tuple[Grammar, Syntax], "re.Pattern[str]"] = {
    (Grammar.RELATIVE, Syntax.MARKDOWN): re.compile(
        r'(!?\[[^\]\n]*\]\()' + _NOT_RELATIVE + r'([^)\s]+)(\))'),
    (Grammar.RELATIVE, Syntax.HTML): re.compile(
        _HTML_TAG + _NOT_RELATIVE + r'([^"\'>]+)(["\'])'),
    (Grammar.RELATIVE, Syntax.CSS): re.compile(
        _CSS_URL + _NOT_RELATIVE + r'([^)"\'\s]+)' + _CSS_END),

    (Grammar.FILE, Syntax.MARKDOWN): re.compile(
        r'(!\[[^\]\n]*\]\()(file://[^)\s]+)(\))'),
    (Grammar.FILE, Syntax.HTML): re.compile(
        _HTML_RESOURCE_TAG + r'(file://[^"\'>]+)(["\'])'),
    (Grammar.FILE, Syntax.CSS): re.compile(
        _CSS_URL + r'(file://[^)"\'\s]+)' + _CSS_END),

    # Local or remote resources of a page shell and its stylesheet
    (Grammar.RESOURCE, Syntax.HTML): re.compile(
        _HTML_RESOURCE_TAG + r'((?:file|https?)://[^"\'>]+)(["\'])'),
    (Grammar.RESOURCE, Syntax.CSS): re.compile(
        _CSS_URL + r'((?:file|https?)://[^)"\'\s]+)' + _CSS_END),

    (Grammar.EMBEDDABLE, Syntax.MARKDOWN): re.compile(
        r'(!\[[^\]\n]*\]\()(?!data:)([^)\s]+)(\))'),

    (Grammar.DATA, Syntax.MARKDOWN): re.compile(
        r'(!\[[^\]\n]*\]\()(data:[^)\s]+)(\))'),
}

_SYNTAXES_FOR_KIND = {
    ContentKind.MARKDOWN: (Syntax.MARKDOWN, Syntax.HTML, Syntax.CSS),
    ContentKind.HTML: (Syntax.HTML, Syntax.CSS),
    ContentKind.CSS: (Syntax.CSS,),
}


def syntaxes_for(kind: ContentKind, embedded_markup: bool = True) -> Tuple[Syntax, ...]:
    """Reference syntaxes that can occur in content of the given kind.

    Markdown may embed raw HTML blocks and inline styles; with
    ``embedded_markup=False`` only Markdown references are considered.
    """
    if kind is ContentKind.MARKDOWN and not embedded_markup:
        return (Syntax.MARKDOWN,)
    return _SYNTAXES_FOR_KIND[kind]


def _reference_kind(syntax: Syntax, prefix: str) -> ReferenceKind:
    if syntax is Syntax.MARKDOWN:
        if prefix.startswith('!'):
            return ReferenceKind.MARKDOWN_IMAGE
        return ReferenceKind.MARKDOWN_LINK
    if syntax is Syntax.HTML:
        return ReferenceKind.HTML_ATTRIBUTE
    return ReferenceKind.CSS_URL


def _to_reference(syntax: Syntax, match: "re.Match[str]") -> Reference:
    prefix, target, suffix = match.group(1), match.group(2), match.group(3)
    return Reference(
        full_match=match.group(0),
        prefix=prefix,
        target=target,
        suffix=suffix,
        kind=_reference_kind(syntax, prefix),
        start=match.start(),
    )


class ReferenceScanner:
    """Finds and rewrites resource references in content."""

    def __init__(self, grammar: Grammar, syntaxes: Sequence[Syntax]):
        """Initialize ReferenceScanner.

        Args:
            grammar: Which kind of targets to match
            syntaxes: Syntaxes to look for; combinations missing from the
                      grammar table are skipped
        """
        self.grammar = grammar
        self.patterns = [
            (syntax, GRAMMARS[(grammar, syntax)])
            for syntax in syntaxes
            if (grammar, syntax) in GRAMMARS
        ]

    def scan(self, content: str) -> Iterator[Reference]:
        """Lazily yield references, one syntax after another.

        Every call starts a fresh scan.
        """
        for syntax, pattern in self.patterns:
            for match in pattern.finditer(content):
                yield _to_reference(syntax, match)

    def targets(self, content: str) -> List[str]:
        """Distinct targets in order of first appearance."""
        seen: Dict[str, None] = {}
        for reference in self.scan(content):
            seen.setdefault(reference.target, None)
        return list(seen)

    def replace(self, content: str, rewrite: Callable[[Reference], Optional[str]]) -> str:
        """Rewrite the target of every matching reference.

        Args:
            content: Content to rewrite
            rewrite: Returns the new target, or None to keep the reference as is

        Returns:
            Rewritten content
        """
        for syntax, pattern in self.patterns:
            def substitute(match: "re.Match[str]", syntax: Syntax = syntax) -> str:
                reference = _to_reference(syntax, match)
                new_target = rewrite(reference)
                if new_target is None:
                    return match.group(0)
                return f"{reference.prefix}{new_target}{reference.suffix}"

            content = pattern.sub(substitute, content)
        return content
