"""Tests for single-file processing."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

from conftest import BROKEN_JS, CSS_SOURCE, JS_SOURCE

from asset_minifier.core.errors import MinifyError
from asset_minifier.core.models import FileStatus
from asset_minifier.core.processor import (
    byte_size,
    process_file,
    strip_source_map_comments,
)


class TestStripSourceMapComments:
    """Tests for strip_source_map_comments function."""

    def test_line_comment(self):
        content = "var a=1;\n//# sourceMappingURL=old.js.map\n"
        assert strip_source_map_comments(content) == "var a=1;\n"

    def test_legacy_line_comment(self):
        content = "var a=1;\n//@ sourceMappingURL=old.js.map"
        assert strip_source_map_comments(content) == "var a=1;\n"

    def test_block_comment(self):
        content = "a{b:c}\n/*# sourceMappingURL=old.css.map */\n"
        assert strip_source_map_comments(content) == "a{b:c}\n"

    def test_no_comment(self):
        assert strip_source_map_comments("var a = 1;") == "var a = 1;"


class TestByteSize:
    """Tests for byte_size function."""

    def test_ascii(self):
        assert byte_size("abc") == 3

    def test_multibyte(self):
        assert byte_size("é€") == 5


class TestProcessFile:
    """Tests for process_file function."""

    def test_minifies_in_place(self, asset_tree: Path, make_options):
        path = asset_tree / "a.js"
        original = path.read_bytes()

        result = process_file(path, make_options(asset_tree))

        assert result.status == FileStatus.MINIFIED
        assert result.file_path == "a.js"
        assert result.original_size == len(original)
        assert result.minified_size == len(path.read_bytes())
        assert result.minified_size < result.original_size
        assert result.output_file_path == str(path)
        assert result.error is None

    def test_sizes_are_utf8_bytes(self, temp_dir: Path, make_options):
        path = temp_dir / "a.js"
        path.write_text("var greeting = 'héllo wörld';\n", encoding="utf-8")

        result = process_file(path, make_options(temp_dir))

        assert result.original_size == len("var greeting = 'héllo wörld';\n".encode("utf-8"))
        assert result.minified_size == len(path.read_bytes())

    def test_ignored_file_untouched(self, asset_tree: Path, make_options):
        path = asset_tree / "b.css"
        result = process_file(path, make_options(asset_tree, ignore_patterns=("b.css",)))

        assert result.status == FileStatus.IGNORED
        assert result.original_size == 0
        assert path.read_text() == CSS_SOURCE

    def test_unsupported_extension(self, asset_tree: Path, make_options):
        result = process_file(asset_tree / "c.txt", make_options(asset_tree))
        assert result.status == FileStatus.SKIPPED

    def test_syntax_error_leaves_file(self, temp_dir: Path, make_options):
        path = temp_dir / "broken.js"
        path.write_text(BROKEN_JS)

        result = process_file(path, make_options(temp_dir))

        assert result.status == FileStatus.ERROR
        assert result.error
        assert result.original_size == result.minified_size == len(BROKEN_JS)
        assert path.read_text() == BROKEN_JS

    def test_unexpected_minifier_failure(self, temp_dir: Path, make_options, monkeypatch):
        def _explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr("asset_minifier.core.processor.minify_content", _explode)
        path = temp_dir / "a.js"
        path.write_text(JS_SOURCE)

        result = process_file(path, make_options(temp_dir))

        assert result.status == FileStatus.ERROR
        assert result.error == "RuntimeError: boom"
        assert path.read_text() == JS_SOURCE

    def test_minify_error_message_kept(self, temp_dir: Path, make_options, monkeypatch):
        def _reject(*args, **kwargs):
            raise MinifyError("unexpected token")

        monkeypatch.setattr("asset_minifier.core.processor.minify_content", _reject)
        path = temp_dir / "a.css"
        path.write_text(CSS_SOURCE)

        result = process_file(path, make_options(temp_dir))
        assert result.error == "unexpected token"

    def test_undecodable_file(self, temp_dir: Path, make_options):
        path = temp_dir / "binary.js"
        path.write_bytes(b"\xff\xfe\xfa")

        result = process_file(path, make_options(temp_dir))

        assert result.status == FileStatus.ERROR
        assert result.error.startswith("Read failed")

    def test_second_run_no_change(self, asset_tree: Path, make_options):
        options = make_options(asset_tree)
        for name in ("a.js", "b.css", "pages/index.html"):
            path = asset_tree / name
            assert process_file(path, options).status == FileStatus.MINIFIED
            once = path.read_bytes()

            result = process_file(path, options)
            assert result.status == FileStatus.NO_CHANGE, name
            assert result.reduction == 0
            assert path.read_bytes() == once

    def test_empty_css_no_change(self, temp_dir: Path, make_options):
        path = temp_dir / "empty.css"
        path.write_text("")

        result = process_file(path, make_options(temp_dir))

        assert result.status == FileStatus.NO_CHANGE
        assert result.reduction_percent == 0.0


class TestDryRun:
    """Tests for dry-run processing."""

    def test_writes_nothing(self, asset_tree: Path, make_options):
        path = asset_tree / "a.js"
        options = make_options(asset_tree, dry_run=True, source_map=True)

        result = process_file(path, options)

        assert result.status == FileStatus.DRY_RUN
        assert result.source_map_generated is False
        assert path.read_text() == JS_SOURCE
        assert not (asset_tree / "a.js.map").exists()

    def test_reports_same_sizes_as_real_run(self, asset_tree: Path, temp_dir: Path, make_options):
        copy = temp_dir / "copy"
        shutil.copytree(asset_tree, copy)

        dry = process_file(asset_tree / "b.css", make_options(asset_tree, dry_run=True))
        real = process_file(copy / "b.css", make_options(copy))

        assert dry.original_size == real.original_size
        assert dry.minified_size == real.minified_size

    def test_output_dir_not_created(self, asset_tree: Path, temp_dir: Path, make_options):
        out = temp_dir / "out"
        options = make_options(asset_tree, dry_run=True, output_dir=str(out))

        result = process_file(asset_tree / "pages" / "index.html", options)

        assert result.status == FileStatus.DRY_RUN
        assert result.output_file_path == str(out / "pages" / "index.html")
        assert not out.exists()


class TestOutputDir:
    """Tests for writing outside the source tree."""

    def test_source_untouched(self, asset_tree: Path, temp_dir: Path, make_options):
        out = temp_dir / "out"
        options = make_options(asset_tree, output_dir=str(out))

        result = process_file(asset_tree / "pages" / "index.html", options)

        written = out / "pages" / "index.html"
        assert result.status == FileStatus.MINIFIED
        assert result.output_file_path == str(written)
        assert written.exists()
        assert result.minified_size == len(written.read_bytes())
        assert (asset_tree / "pages" / "index.html").read_text().startswith("<!DOCTYPE html>")

    def test_rename_pattern(self, asset_tree: Path, temp_dir: Path, make_options):
        options = make_options(asset_tree, output_dir=str(temp_dir / "dist" / "**" / "*.min.js"))

        result = process_file(asset_tree / "a.js", options)

        assert result.output_file_path == str(temp_dir / "dist" / "a.min.js")
        assert (temp_dir / "dist" / "a.min.js").exists()
        assert (asset_tree / "a.js").read_text() == JS_SOURCE


class TestSourceMaps:
    """Tests for source map output."""

    def test_map_next_to_output(self, asset_tree: Path, make_options):
        path = asset_tree / "a.js"

        result = process_file(path, make_options(asset_tree, source_map=True))

        map_path = asset_tree / "a.js.map"
        assert result.source_map_generated is True
        assert map_path.exists()
        data = json.loads(map_path.read_text())
        assert data["version"] == 3
        assert data["file"] == "a.js"
        assert "a.js" in data["sources"]
        assert path.read_text().endswith("//# sourceMappingURL=a.js.map")

    def test_map_dir_relative_to_source(self, asset_tree: Path, make_options):
        path = asset_tree / "a.js"

        result = process_file(path, make_options(asset_tree, source_map=True, source_map_dir="maps"))

        assert result.source_map_generated is True
        data = json.loads((asset_tree / "maps" / "a.js.map").read_text())
        assert "../a.js" in data["sources"]
        assert path.read_text().endswith("//# sourceMappingURL=maps/a.js.map")

    def test_rerun_replaces_reference(self, asset_tree: Path, make_options):
        path = asset_tree / "a.js"
        options = make_options(asset_tree, source_map=True)

        process_file(path, options)
        result = process_file(path, options)

        assert result.status == FileStatus.NO_CHANGE
        assert path.read_text().count("sourceMappingURL") == 1

    def test_css_has_no_map(self, asset_tree: Path, make_options):
        result = process_file(asset_tree / "b.css", make_options(asset_tree, source_map=True))

        assert result.status == FileStatus.MINIFIED
        assert result.source_map_generated is False
        assert not (asset_tree / "b.css.map").exists()

    def test_modern_js_without_map(self, temp_dir: Path, make_options):
        path = temp_dir / "arrow.js"
        path.write_text("const double = (value) => value * 2;\n")

        result = process_file(path, make_options(temp_dir, source_map=True))

        assert result.status == FileStatus.MINIFIED
        assert result.source_map_generated is False
        assert not (temp_dir / "arrow.js.map").exists()
        assert "sourceMappingURL" not in path.read_text()


class TestWriteFailures:
    """Tests for I/O failures around a single file."""

    def test_output_write_denied(self, temp_dir: Path, make_options, monkeypatch):
        def _deny(self, *args, **kwargs):
            raise PermissionError(13, "Permission denied")

        path = temp_dir / "a.js"
        path.write_text(JS_SOURCE)
        monkeypatch.setattr(Path, "write_bytes", _deny)

        result = process_file(path, make_options(temp_dir))

        assert result.status == FileStatus.ERROR
        assert result.error.startswith("Write failed")
        assert result.reduction == 0
        assert path.read_text() == JS_SOURCE

    def test_read_denied(self, temp_dir: Path, make_options, monkeypatch):
        def _deny(self, *args, **kwargs):
            raise PermissionError(13, "Permission denied")

        path = temp_dir / "a.css"
        path.write_text(CSS_SOURCE)
        monkeypatch.setattr(Path, "read_bytes", _deny)

        result = process_file(path, make_options(temp_dir))

        assert result.status == FileStatus.ERROR
        assert result.error.startswith("Read failed")

    def test_map_write_denied_leaves_source(self, temp_dir: Path, make_options, monkeypatch):
        def _deny(self, *args, **kwargs):
            raise PermissionError(13, "Permission denied")

        path = temp_dir / "a.js"
        path.write_text(JS_SOURCE)
        monkeypatch.setattr(Path, "write_text", _deny)

        result = process_file(path, make_options(temp_dir, source_map=True))

        assert result.status == FileStatus.ERROR
        assert result.error.startswith("Write failed")
        assert result.source_map_generated is False
        assert path.read_bytes().decode("utf-8") == JS_SOURCE
        assert not (temp_dir / "a.js.map").exists()
