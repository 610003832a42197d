"""Tests for configuration loading."""

from pathlib import Path

import pytest

from markdeck.core.config import MarkdeckConfig, find_config
from markdeck.core.models import ConfigurationError


class TestMarkdeckConfig:
    """Tests for MarkdeckConfig."""

    def test_defaults(self, tmp_path):
        config = find_config(tmp_path)

        assert config.template_dir == Path("template")
        assert config.fix_relative_paths is True
        assert config.inline is False

    def test_from_yaml(self, tmp_path):
        (tmp_path / "markdeck.yml").write_text(
            "template_dir: theme\noutput_dir: /srv/slides\ninline: true\nstrip_notes: true\n"
        )

        config = find_config(tmp_path)

        assert config.template_dir == tmp_path / "theme"
        assert config.output_dir == Path("/srv/slides")
        assert config.inline is True
        assert config.strip_notes is True

    def test_empty_file(self, tmp_path):
        path = tmp_path / "markdeck.yml"
        path.write_text("")
        assert MarkdeckConfig.from_yaml(path) == MarkdeckConfig()

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "markdeck.yml"
        path.write_text("colour: blue\n")

        with pytest.raises(ConfigurationError, match="colour"):
            MarkdeckConfig.from_yaml(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "markdeck.yml"
        path.write_text("- one\n- two\n")

        with pytest.raises(ConfigurationError):
            MarkdeckConfig.from_yaml(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "markdeck.yml"
        path.write_text("inline: [unclosed\n")

        with pytest.raises(ConfigurationError):
            MarkdeckConfig.from_yaml(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            MarkdeckConfig.from_yaml(tmp_path / "nope.yml")

    def test_merged_ignores_none(self):
        config = MarkdeckConfig(inline=True).merged(inline=None, strip_notes=True)

        assert config.inline is True
        assert config.strip_notes is True

    def test_transform_options(self):
        options = MarkdeckConfig(strip_fragments=True, inline_embedded_markup=False).transform_options(
            embed_images=True
        )

        assert options.strip_fragments is True
        assert options.inline_embedded_markup is False
        assert options.embed_images is True
        assert options.fix_relative_paths is True
