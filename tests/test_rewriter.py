"""Tests for SlideRewriter."""

import pytest

from markdeck.core.datauri import encode
from markdeck.core.models import FatalIoError, TransformOptions
from markdeck.core.rewriter import SlideRewriter

PNG_BYTES = b"\x89PNG\r\n\x1a\ndiagram"


class CountingReader:
    def __init__(self):
        self.calls = []

    def __call__(self, path):
        self.calls.append(path)
        return path.read_bytes()


@pytest.fixture
def deck(tmp_path):
    source = tmp_path / "deck"
    source.mkdir()
    (source / "diagram.png").write_bytes(PNG_BYTES)
    return source


class TestSlideRewriter:
    """Tests for SlideRewriter."""

    def test_in_place(self, deck):
        slide = deck / "talk.md"
        slide.write_text("# A\n???\nnote\n---\n# B\n--\nmore")
        rewriter = SlideRewriter(TransformOptions(strip_notes=True, strip_fragments=True))

        written = rewriter.transform_file(slide)

        assert written == slide
        assert slide.read_text() == "# A\n---\n# B\nmore"

    def test_embed_images(self, deck):
        slide = deck / "talk.md"
        slide.write_text("![d](diagram.png)\n---\n![d again](diagram.png)")
        reader = CountingReader()
        rewriter = SlideRewriter(TransformOptions(embed_images=True), read_bytes=reader)

        rewriter.transform_file(slide)

        uri = encode(PNG_BYTES, "image/png")
        assert slide.read_text() == f"![d]({uri})\n---\n![d again]({uri})"
        assert len(reader.calls) == 1

    def test_extract_images_to_output(self, deck, tmp_path):
        slide = deck / "talk.md"
        slide.write_text("![cat](data:image/jpeg;base64,AAAA)")
        output = tmp_path / "out"
        rewriter = SlideRewriter(TransformOptions(), extract_images_dir="images")

        written = rewriter.transform_file(slide, output)

        assert written == output / "talk.md"
        assert written.read_text() == "![cat](images/cat.jpg)"
        assert (output / "images" / "cat.jpg").read_bytes() == b"\x00\x00\x00"
        assert slide.read_text() == "![cat](data:image/jpeg;base64,AAAA)"

    def test_embed_then_extract(self, deck, tmp_path):
        slide = deck / "talk.md"
        slide.write_text("![diagram](diagram.png)")
        output = tmp_path / "out"
        rewriter = SlideRewriter(TransformOptions(embed_images=True), extract_images_dir="img")

        rewriter.transform_file(slide, output)

        assert (output / "talk.md").read_text() == "![diagram](img/diagram.png)"
        assert (output / "img" / "diagram.png").read_bytes() == PNG_BYTES

    def test_relative_references_follow_output(self, deck, tmp_path):
        slide = deck / "talk.md"
        slide.write_text("![d](diagram.png) [site](https://example.com)")
        output = tmp_path / "out"

        SlideRewriter(TransformOptions()).transform_file(slide, output)

        assert (output / "talk.md").read_text() == "![d](../deck/diagram.png) [site](https://example.com)"

    def test_existing_images_followed_when_extracting(self, deck, tmp_path):
        (deck / "images").mkdir()
        (deck / "images" / "logo.svg").write_text("<svg/>")
        slide = deck / "talk.md"
        slide.write_text("![logo](images/logo.svg) ![chart](data:image/png;base64,YWJj)")
        output = tmp_path / "out"
        rewriter = SlideRewriter(TransformOptions(), extract_images_dir="images")

        rewriter.transform_file(slide, output)

        assert (output / "talk.md").read_text() == (
            "![logo](../deck/images/logo.svg) ![chart](images/chart.png)"
        )
        assert (output / "images" / "chart.png").read_bytes() == b"abc"

    def test_counter_shared_across_files(self, deck, tmp_path):
        for name in ("one", "two"):
            (deck / f"{name}.md").write_text("![](data:image/png;base64,YWJj)" if name == "one"
                                              else "![](data:image/png;base64,ZGVm)")
        output = tmp_path / "out"
        rewriter = SlideRewriter(TransformOptions(), extract_images_dir="images")

        result = rewriter.transform_all([deck / "one.md", deck / "two.md"], output)

        assert result.ok
        assert (output / "one.md").read_text() == "![](images/1.png)"
        assert (output / "two.md").read_text() == "![](images/2.png)"

    def test_missing_file(self, deck):
        rewriter = SlideRewriter(TransformOptions())

        with pytest.raises(FatalIoError):
            rewriter.transform_all([deck / "missing.md"])

    def test_missing_file_keep_going(self, deck):
        (deck / "ok.md").write_text("# ok")
        rewriter = SlideRewriter(TransformOptions())

        result = rewriter.transform_all([deck / "missing.md", deck / "ok.md"], stop_on_error=False)

        assert len(result.failures) == 1
        assert result.exported_files == [deck / "ok.md"]
