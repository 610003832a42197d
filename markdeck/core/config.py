"""Configuration file support for Markdeck."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from markdeck.core.models import ConfigurationError, TransformOptions

CONFIG_FILENAME = "markdeck.yml"


@dataclass
class MarkdeckConfig:
    """Project defaults, read from ``markdeck.yml`` and overridden by the CLI."""
    template_dir: Path = Path("template")
    output_dir: Path = Path("dist")
    strip_notes: bool = False
    strip_fragments: bool = False
    fix_relative_paths: bool = True
    inline: bool = False
    inline_embedded_markup: bool = True
    separate_stylesheet: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any], root: Optional[Path] = None) -> "MarkdeckConfig":
        """Build a config from parsed YAML.

        Args:
            data: Mapping of option names to values
            root: Directory relative paths in the file are resolved against

        Raises:
            ConfigurationError: on unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

        values = dict(data)
        for key in ('template_dir', 'output_dir'):
            if key in values:
                path = Path(values[key])
                values[key] = (root / path) if root and not path.is_absolute() else path
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: Path) -> "MarkdeckConfig":
        """Load a config file.

        Raises:
            ConfigurationError: if the file is not a valid YAML mapping
        """
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e.strerror or e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse {path.name}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path.name} must contain a mapping")
        return cls.from_dict(data, root=path.parent)

    def merged(self, **overrides: Any) -> "MarkdeckConfig":
        """Copy with every non-None override applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return MarkdeckConfig(**values)

    def transform_options(self, **extra: Any) -> TransformOptions:
        return TransformOptions(
            strip_notes=self.strip_notes,
            strip_fragments=self.strip_fragments,
            fix_relative_paths=self.fix_relative_paths,
            inline=self.inline,
            inline_embedded_markup=self.inline_embedded_markup,
            **extra,
        )


def find_config(directory: Optional[Path] = None) -> MarkdeckConfig:
    """Load ``markdeck.yml`` from directory (default: cwd) or return defaults."""
    path = Path(directory or Path.cwd()) / CONFIG_FILENAME
    if path.exists():
        return MarkdeckConfig.from_yaml(path)
    return MarkdeckConfig()
