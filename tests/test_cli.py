"""Tests for h2md.cli module and h2md.utils."""

import warnings

from click.testing import CliRunner

from h2md.cli import main
from h2md.utils import source_to_slug


def _write(tmp_path, name, html):
    path = tmp_path / name
    path.write_text(html, encoding="utf-8")
    return path


class TestCli:
    def test_file_to_stdout(self, tmp_path):
        path = _write(tmp_path, "page.html", "<p>Hello <strong>World</strong></p>")
        result = CliRunner().invoke(main, [str(path)])
        assert result.exit_code == 0
        assert result.output == "Hello **World**\n"

    def test_stdin(self):
        result = CliRunner().invoke(main, ["-"], input="<h1>Title</h1><p>Text</p>")
        assert result.exit_code == 0
        assert result.output == "# Title\n\nText\n"

    def test_stdin_without_deprecation_warning(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            result = CliRunner().invoke(main, ["-"], input="<p>quiet</p>")
        assert result.exception is None
        assert result.output == "quiet\n"

    def test_gfm_flag(self, tmp_path):
        path = _write(tmp_path, "t.html", "<p><del>gone</del></p>")
        plain = CliRunner().invoke(main, [str(path)])
        gfm = CliRunner().invoke(main, [str(path), "--gfm"])
        assert "~~gone~~" not in plain.output
        assert "~~gone~~" in gfm.output

    def test_selector(self, tmp_path):
        html = '<div class="nav">Menu</div><article><p>Body</p></article>'
        path = _write(tmp_path, "s.html", html)
        result = CliRunner().invoke(main, [str(path), "--selector", "article"])
        assert result.exit_code == 0
        assert "Body" in result.output
        assert "Menu" not in result.output

    def test_output_directory(self, tmp_path):
        path = _write(tmp_path, "page.html", "<p>Saved text</p>")
        out_dir = tmp_path / "out"
        result = CliRunner().invoke(main, [str(path), "-o", f"{out_dir}/"])
        assert result.exit_code == 0
        saved = out_dir / "page.md"
        assert saved.read_text(encoding="utf-8") == "Saved text\n"

    def test_output_file(self, tmp_path):
        path = _write(tmp_path, "page.html", "<p>x</p>")
        target = tmp_path / "nested" / "result.md"
        result = CliRunner().invoke(main, [str(path), "-o", str(target)])
        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8") == "x\n"

    def test_missing_source(self, tmp_path):
        result = CliRunner().invoke(main, [str(tmp_path / "nope.html")])
        assert result.exit_code != 0
        assert "Source must be" in result.output


class TestSourceToSlug:
    def test_url(self):
        assert source_to_slug("https://example.com/blog/post-1") == "example_com_blog_post_1"

    def test_file_path(self):
        assert source_to_slug("/tmp/docs/My Page.html") == "My_Page"

    def test_empty(self):
        assert source_to_slug("https://") == "page"
