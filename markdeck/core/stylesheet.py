"""Stylesheet compilation for the presentation template."""

import io
import os
import sys
import tempfile
from contextlib import contextmanager, redirect_stderr
from pathlib import Path
from typing import Iterator

import sass

from markdeck.core.models import ConfigurationError

SASS_TEMPLATE = "style.scss"


@contextmanager
def quiet_output() -> Iterator[io.StringIO]:
    """Capture stderr for the duration of the block.

    Both ``sys.stderr`` and file descriptor 2 are redirected, so warnings
    written by native code such as libsass are captured as well. The
    previous streams are restored on every exit path. The captured text is
    collected in the yielded buffer once the block exits.
    """
    buffer = io.StringIO()
    sys.stderr.flush()
    saved_fd = os.dup(2)
    with tempfile.TemporaryFile() as sink:
        os.dup2(sink.fileno(), 2)
        try:
            with redirect_stderr(buffer):
                yield buffer
        finally:
            os.dup2(saved_fd, 2)
            os.close(saved_fd)
            sink.seek(0)
            buffer.write(sink.read().decode('utf-8', 'replace'))


def compile_stylesheet(template_dir: Path) -> str:
    """Compile the template's SCSS into compressed CSS.

    Raises:
        ConfigurationError: if the stylesheet is missing or does not compile
    """
    template_dir = Path(template_dir)
    source = template_dir / SASS_TEMPLATE
    if not source.exists():
        raise ConfigurationError(f"{source} not found")

    try:
        with quiet_output() as captured:
            return sass.compile(
                filename=str(source),
                include_paths=[str(template_dir)],
                output_style='compressed',
            )
    except sass.CompileError as e:
        details = captured.getvalue().strip()
        message = f"Cannot compile {source}: {e}"
        if details:
            message = f"{message}\n{details}"
        raise ConfigurationError(message) from e
