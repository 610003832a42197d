"""Tests for HTML export."""

import os
import re
import sys
from unittest.mock import Mock

import pytest

from markdeck.core.exporter import Exporter, check_template, render_template
from markdeck.core.models import ConfigurationError, FatalIoError, TransformOptions
from markdeck.core.starter import init_presentation
from markdeck.core.stylesheet import compile_stylesheet, quiet_output

SHELL = """<!DOCTYPE html>
<html>
<head>
<title>{{ title }}</title>
<link rel="icon" href="favicon.png">
{{ style }}
</head>
<body>
<script src="remark.js"></script>
<script>var slideshow = remark.create({ {{ source }} });</script>
</body>
</html>
"""

STYLE = """$accent: #f07b3f;
body { background: url(bg.png); }
h1 { color: $accent; }
"""

SLIDES = """title: Demo Talk
class: middle

# Hello

![logo](logo.png)

???
secret speaker note
---

# Second slide
"""


@pytest.fixture
def template_dir(tmp_path):
    template = tmp_path / "template"
    template.mkdir()
    (template / "index.html").write_text(SHELL)
    (template / "style.scss").write_text(STYLE)
    (template / "bg.png").write_bytes(b"\x89PNG\r\n\x1a\nbackground")
    (template / "favicon.png").write_bytes(b"\x89PNG\r\n\x1a\nicon")
    (template / "remark.js").write_text("var remark = {create: function () {}};")
    return template


@pytest.fixture
def slides(tmp_path):
    slides_dir = tmp_path / "slides"
    slides_dir.mkdir()
    (slides_dir / "talk.md").write_text(SLIDES)
    (slides_dir / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\nlogo")
    return slides_dir


class TestExportInline:
    """End-to-end export of standalone presentations."""

    def test_standalone_output_has_no_external_references(self, template_dir, slides, tmp_path):
        options = TransformOptions(fix_relative_paths=True, inline=True)
        exporter = Exporter(template_dir, options)

        result = exporter.export_all([slides / "talk.md"], tmp_path / "dist")

        assert result.ok
        assert result.exported_files == [tmp_path / "dist" / "talk.html"]
        page = (tmp_path / "dist" / "talk.html").read_text()

        attributes = re.findall(r'(?:src|href)=["\']([^"\']+)["\']', page)
        urls = re.findall(r'url\(([^)]*)\)', page)
        assert len(attributes) == 2
        assert len(urls) == 1
        assert all(value.startswith("data:") for value in attributes + urls)
        assert "file://" not in page
        assert "![logo](data:image/png;base64," in page
        assert "<title>Demo Talk</title>" in page

    def test_starter_presentation_is_standalone(self, tmp_path):
        template = init_presentation(tmp_path)
        fetch = Mock(return_value=(b"var remark = {create: function () {}};", "application/javascript"))
        exporter = Exporter(template, TransformOptions(inline=True), fetch=fetch)

        exporter.export_all([tmp_path / "presentation.md"], tmp_path / "dist")

        page = (tmp_path / "dist" / "presentation.html").read_text()
        fetch.assert_called_once_with("https://remarkjs.com/downloads/remark-latest.min.js")
        assert "remarkjs.com" not in page
        assert '<script src="data:application/javascript;base64,' in page
        assert "![Markdeck](data:image/svg+xml;base64," in page

    def test_notes_stripped(self, template_dir, slides, tmp_path):
        options = TransformOptions(strip_notes=True, fix_relative_paths=True, inline=True)

        Exporter(template_dir, options).export_all([slides / "talk.md"], tmp_path / "dist")

        page = (tmp_path / "dist" / "talk.html").read_text()
        assert "secret speaker note" not in page
        assert "Second slide" in page


class TestExportLinked:
    """Export that keeps resources as file references."""

    def test_paths_rebased(self, template_dir, slides, tmp_path):
        options = TransformOptions(fix_relative_paths=True)

        Exporter(template_dir, options).export_all([slides / "talk.md"], tmp_path / "dist")

        page = (tmp_path / "dist" / "talk.html").read_text()
        template_url = f"file://{template_dir.resolve().as_posix()}"
        assert f'src="{template_url}/remark.js"' in page
        assert f"url({template_url}/bg.png)" in page
        assert f"file://{slides.resolve().as_posix()}/logo.png" in page

    def test_separate_stylesheet(self, template_dir, slides, tmp_path):
        exporter = Exporter(template_dir, TransformOptions(), separate_stylesheet=True)

        exporter.export_all([slides / "talk.md"], tmp_path / "dist")

        page = (tmp_path / "dist" / "talk.html").read_text()
        css = (tmp_path / "dist" / "style.css").read_text()
        assert '<link rel="stylesheet" href="style.css">' in page
        assert "<style>" not in page
        assert "color:#f07b3f" in css

    def test_separate_stylesheet_ignored_when_inlining(self, template_dir, slides, tmp_path):
        exporter = Exporter(template_dir, TransformOptions(inline=True), separate_stylesheet=True)

        exporter.export_all([slides / "talk.md"], tmp_path / "dist")

        assert not (tmp_path / "dist" / "style.css").exists()

    def test_fallback_title(self, template_dir, tmp_path):
        md = tmp_path / "my-first-talk.md"
        md.write_text("# No title here")

        Exporter(template_dir, TransformOptions()).export_file(md, tmp_path / "dist")

        assert "<title>My First Talk</title>" in (tmp_path / "dist" / "my-first-talk.html").read_text()

    def test_script_end_tag_escaped(self, template_dir, tmp_path):
        md = tmp_path / "code.md"
        md.write_text("```html\n<script>x()</script>\n```")

        Exporter(template_dir, TransformOptions()).export_file(md, tmp_path / "dist")

        page = (tmp_path / "dist" / "code.html").read_text()
        assert "<\\/script>" in page

    def test_files_exported_in_order(self, template_dir, tmp_path, capsys):
        files = []
        for name in ("b", "a"):
            path = tmp_path / f"{name}.md"
            path.write_text(f"# {name}")
            files.append(path)

        result = Exporter(template_dir, TransformOptions()).export_all(files, tmp_path / "dist")

        assert [p.name for p in result.exported_files] == ["b.html", "a.html"]
        out = capsys.readouterr().out
        assert out.index("1/2: b.md") < out.index("2/2: a.md")


class TestExportErrors:
    """Tests for export error handling."""

    def test_missing_template_is_fatal_before_processing(self, tmp_path, slides):
        exporter = Exporter(tmp_path / "nowhere", TransformOptions())

        with pytest.raises(ConfigurationError):
            exporter.export_all([slides / "talk.md"], tmp_path / "dist")

        assert not (tmp_path / "dist").exists()

    def test_missing_slide_stops_batch(self, template_dir, slides, tmp_path):
        exporter = Exporter(template_dir, TransformOptions())
        files = [tmp_path / "missing.md", slides / "talk.md"]

        with pytest.raises(FatalIoError):
            exporter.export_all(files, tmp_path / "dist")

        assert not (tmp_path / "dist" / "talk.html").exists()

    def test_keep_going_records_failure(self, template_dir, slides, tmp_path):
        exporter = Exporter(template_dir, TransformOptions())
        files = [tmp_path / "missing.md", slides / "talk.md"]

        result = exporter.export_all(files, tmp_path / "dist", stop_on_error=False)

        assert not result.ok
        assert result.failures[0].path == tmp_path / "missing.md"
        assert result.exported_files == [tmp_path / "dist" / "talk.html"]

    def test_missing_image_does_not_fail_export(self, template_dir, tmp_path, capsys):
        md = tmp_path / "broken.md"
        md.write_text("![gone](gone.png)")

        result = Exporter(template_dir, TransformOptions(inline=True)).export_all([md], tmp_path / "dist")

        assert result.ok
        assert "Warning" in capsys.readouterr().out

    def test_stylesheet_compiled_once(self, template_dir, tmp_path):
        calls = []

        def compiler(directory):
            calls.append(directory)
            return "body{}"

        files = []
        for name in ("a", "b"):
            path = tmp_path / f"{name}.md"
            path.write_text("# x")
            files.append(path)

        Exporter(template_dir, TransformOptions(), style_compiler=compiler).export_all(files, tmp_path / "dist")

        assert calls == [template_dir]


class TestTemplateHelpers:
    """Tests for template and stylesheet helpers."""

    def test_check_template_ok(self, template_dir):
        check_template(template_dir)

    def test_check_template_missing_stylesheet(self, template_dir):
        (template_dir / "style.scss").unlink()

        with pytest.raises(ConfigurationError, match="style.scss"):
            check_template(template_dir)

    def test_render_template(self):
        html = render_template("<title>{{ title }}</title>{{ style }}<p>{{ source }}</p>",
                               source="source: \"<b>\"", style="<style>a{}</style>", title="T & U")

        assert html == "<title>T & U</title><style>a{}</style><p>source: \"<b>\"</p>"

    def test_compile_stylesheet(self, template_dir):
        css = compile_stylesheet(template_dir)

        assert "h1{color:#f07b3f}" in css

    def test_compile_error(self, template_dir):
        (template_dir / "style.scss").write_text("body { color: $undefined; }")

        with pytest.raises(ConfigurationError):
            compile_stylesheet(template_dir)

    def test_quiet_output_restores_stderr(self):
        original = sys.stderr

        with pytest.raises(RuntimeError):
            with quiet_output() as captured:
                print("noise", file=sys.stderr)
                raise RuntimeError("failed")

        assert sys.stderr is original
        assert captured.getvalue() == "noise\n"

    def test_quiet_output_captures_native_writes(self, capfd):
        with quiet_output() as captured:
            os.write(2, b"native warning\n")

        assert "native warning" in captured.getvalue()
        assert capfd.readouterr().err == ""

    def test_compiler_warnings_silenced(self, template_dir, capfd):
        (template_dir / "style.scss").write_text('@warn "careful"; h1 { color: red; }')

        css = compile_stylesheet(template_dir)

        assert "h1{color:red}" in css
        assert "careful" not in capfd.readouterr().err
