"""Path rebasing for relative resource references."""

import os
from pathlib import Path
from typing import Callable, Optional, Sequence

from markdeck.core.models import Reference
from markdeck.core.scanner import Grammar, ReferenceScanner, Syntax


def file_url(base_dir: Path, target: str) -> str:
    """Absolute ``file://`` URL for a target relative to base_dir."""
    return f"file://{Path(base_dir).resolve().as_posix()}/{target}"


class PathRebaser:
    """Rewrites relative references so they resolve from elsewhere.

    By default targets become ``file://`` URLs anchored at base_dir, which
    makes rebasing idempotent: a rebased target is no longer relative and
    is left alone on the next pass. With ``relative_to`` set, targets are
    rewritten relative to that directory instead.
    """

    def __init__(
        self,
        base_dir: Path,
        syntaxes: Sequence[Syntax],
        relative_to: Optional[Path] = None,
    ):
        self.base_dir = Path(base_dir)
        self.relative_to = Path(relative_to) if relative_to else None
        self.scanner = ReferenceScanner(Grammar.RELATIVE, syntaxes)

    def rebase(self, content: str, keep: Optional[Callable[[Reference], bool]] = None) -> str:
        """Rewrite relative references, except those for which keep() is true."""
        def rewrite(reference: Reference) -> Optional[str]:
            if keep and keep(reference):
                return None
            return self.rebase_target(reference.target)

        return self.scanner.replace(content, rewrite)

    def rebase_target(self, target: str) -> str:
        if self.relative_to is None:
            return file_url(self.base_dir, target)
        source = self.base_dir.resolve() / target
        return Path(os.path.relpath(source, self.relative_to.resolve())).as_posix()
