"""Presentation starter used by ``markdeck init``."""

import shutil
from pathlib import Path
from typing import Optional

from markdeck.core.models import ConfigurationError, FatalIoError

STARTER_DIR = Path(__file__).resolve().parent.parent / "starter"
TEMPLATE_DIR = "template"
STARTER_PRESENTATION = "presentation.md"
STARTER_IMAGES = "images"


def init_presentation(
    target_dir: Path,
    from_template: Optional[Path] = None,
    force: bool = False,
) -> Path:
    """Create a template directory and a sample presentation.

    Args:
        target_dir: Directory to initialize
        from_template: Custom template directory to copy instead of the starter
        force: Overwrite an existing template directory

    Returns:
        Path of the created template directory

    Raises:
        ConfigurationError: if the template already exists (without force)
                            or the custom template is missing
    """
    target_dir = Path(target_dir)
    template_dir = target_dir / TEMPLATE_DIR
    source = Path(from_template).resolve() if from_template else STARTER_DIR / TEMPLATE_DIR

    if template_dir.exists() and not force:
        raise ConfigurationError("Template directory already exists")
    if not source.is_dir():
        raise ConfigurationError(f"Template directory not found: {source}")

    try:
        shutil.copytree(source, template_dir, dirs_exist_ok=True)
        presentation = target_dir / STARTER_PRESENTATION
        if force or not presentation.exists():
            shutil.copyfile(STARTER_DIR / STARTER_PRESENTATION, presentation)
            shutil.copytree(STARTER_DIR / STARTER_IMAGES, target_dir / STARTER_IMAGES, dirs_exist_ok=True)
    except OSError as e:
        raise FatalIoError(template_dir, e.strerror or str(e)) from e
    return template_dir
