"""Discovery of slide Markdown files."""

from pathlib import Path
from typing import List, Optional, Sequence

from markdeck.core.models import ConfigurationError


def find_markdown_files(paths: Optional[Sequence[Path]] = None) -> List[Path]:
    """Resolve command line inputs into a list of Markdown files.

    With no input, or a single directory, every ``*.md`` file directly in
    that directory is used, sorted by name. Otherwise the inputs are taken
    as the file list, in the given order.

    Args:
        paths: Files, or a single directory

    Returns:
        Markdown files to process

    Raises:
        ConfigurationError: if no Markdown file is found
    """
    paths = [Path(p) for p in (paths or [])]

    if not paths or (len(paths) == 1 and paths[0].is_dir()):
        directory = paths[0] if paths else Path(".")
        files = sorted(directory.glob("*.md"))
    else:
        files = []
        for path in paths:
            if path.is_file():
                files.append(path)
            else:
                print(f"Warning: Not a file, skipping: {path}")

    if not files:
        raise ConfigurationError("No markdown files found")
    return files
