"""Text passes specific to slide Markdown.

Presenter notes start at a line holding only ``???`` and run until the next
slide separator (``---``) or incremental separator (``--``). Fragment markers
are lines starting with exactly two hyphens.
"""

import re
from pathlib import Path
from typing import Optional

import titlecase as tc

NOTES_PATTERN = re.compile(r'^\?\?\?$[\s\S]*?(^---?$|\Z)', re.MULTILINE)
FRAGMENTS_PATTERN = re.compile(r'^--(?:[^-\n][^\n]*)?(?:\n|\Z)', re.MULTILINE)
TITLE_PATTERN = re.compile(r'^title:[ \t]*(.*?)[ \t]*$', re.MULTILINE)


def strip_notes(md: str) -> str:
    """Remove presenter notes, keeping the separator that closes them."""
    return NOTES_PATTERN.sub(r'\1', md)


def strip_fragments(md: str) -> str:
    """Remove fragment marker lines (handout output)."""
    return FRAGMENTS_PATTERN.sub('', md)


def get_title(md: str) -> Optional[str]:
    """Title from the first ``title:`` property line, if any."""
    match = TITLE_PATTERN.search(md)
    if match and match.group(1):
        return match.group(1)
    return None


def fallback_title(path: Path) -> str:
    """Readable title derived from a file name, e.g. ``my-talk.md`` -> ``My Talk``."""
    words = re.sub(r'[-_]+', ' ', Path(path).stem).strip()
    return tc.titlecase(words) if words else Path(path).stem
