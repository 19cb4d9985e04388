"""Tests for glob pattern matching."""

from __future__ import annotations

import pytest

from asset_minifier.core.matcher import (
    anchor,
    compile_patterns,
    expand_braces,
    matches,
    normalize_path,
    spec_matches,
)


class TestNormalizePath:
    """Tests for normalize_path function."""

    def test_backslashes(self):
        assert normalize_path("a\\b\\c.js") == "a/b/c.js"

    def test_leading_dot_slash(self):
        assert normalize_path("./a/b.js") == "a/b.js"
        assert normalize_path("././a.js") == "a.js"

    def test_plain_path_unchanged(self):
        assert normalize_path("a/b.js") == "a/b.js"


class TestExpandBraces:
    """Tests for expand_braces function."""

    def test_no_braces(self):
        assert expand_braces("*.js") == ["*.js"]

    def test_simple_group(self):
        assert expand_braces("*.{js,css}") == ["*.js", "*.css"]

    def test_multiple_groups(self):
        assert expand_braces("{a,b}/*.{js,css}") == ["a/*.js", "a/*.css", "b/*.js", "b/*.css"]

    def test_nested_group(self):
        assert expand_braces("x.{js,{c,m}js}") == ["x.js", "x.cjs", "x.mjs"]

    def test_single_option_is_literal(self):
        assert expand_braces("{js}.txt") == ["{js}.txt"]

    def test_unclosed_brace_is_literal(self):
        assert expand_braces("a{b,c") == ["a{b,c"]


class TestMatches:
    """Tests for matches function."""

    def test_star_within_segment(self):
        assert matches("app.js", "*.js")
        assert not matches("src/app.js", "*.js")

    def test_double_star_any_depth(self):
        assert matches("app.js", "**/*.js")
        assert matches("src/app.js", "**/*.js")
        assert matches("src/lib/deep/app.js", "**/*.js")
        assert not matches("src/app.css", "**/*.js")

    def test_double_star_in_middle(self):
        assert matches("src/app.js", "src/**/*.js")
        assert matches("src/a/b/app.js", "src/**/*.js")
        assert not matches("lib/app.js", "src/**/*.js")

    def test_trailing_double_star(self):
        assert matches("vendor/a.js", "vendor/**")
        assert matches("vendor/x/y/a.js", "vendor/**")
        assert not matches("vendors/a.js", "vendor/**")

    def test_bare_double_star(self):
        assert matches("anything/at/all.js", "**")

    def test_question_mark(self):
        assert matches("a1.js", "a?.js")
        assert not matches("a12.js", "a?.js")
        assert not matches("a/.js", "a?.js")

    def test_character_class(self):
        assert matches("a1.js", "a[0-9].js")
        assert not matches("ab.js", "a[0-9].js")

    def test_negated_character_class(self):
        assert matches("ab.js", "a[!0-9].js")
        assert not matches("a1.js", "a[!0-9].js")

    def test_brace_alternatives(self):
        assert matches("webpack.config.mjs", "webpack.config.{js,cjs,mjs}")
        assert not matches("webpack.config.ts", "webpack.config.{js,cjs,mjs}")

    def test_trailing_slash_matches_contents(self):
        assert matches("vendor", "vendor/")
        assert matches("vendor/lib/a.js", "vendor/")

    def test_literal_dots_escaped(self):
        assert not matches("appxjs", "app.js")

    def test_backslash_path_normalized(self):
        assert matches("src\\app.js", "src/*.js")

    def test_whole_path_required(self):
        assert not matches("app.js.bak", "*.js")

    @pytest.mark.parametrize(
        "path",
        ["webpack.config.js", "tools/webpack.config.js", "a/b/c/webpack.config.cjs"],
    )
    def test_config_file_anywhere(self, path):
        assert matches(path, "**/webpack.config.{js,cjs,mjs}")

    def test_bare_name_is_rooted(self):
        assert matches("b.css", "b.css")
        assert not matches("styles/b.css", "b.css")

    def test_directory_name_covers_contents(self):
        assert matches("images", "images/")
        assert matches("images/icon.png", "images/")
        assert matches("images/icon.png", "images")


class TestAnchor:
    """Tests for anchor function."""

    def test_adds_leading_slash(self):
        assert anchor("b.css") == "/b.css"
        assert anchor("**/*.js") == "/**/*.js"

    def test_already_anchored(self):
        assert anchor("/dist/") == "/dist/"

    def test_negated(self):
        assert anchor("!keep.js") == "!/keep.js"

    def test_normalizes_path(self):
        assert anchor("./src\\*.js") == "/src/*.js"


class TestSpecMatches:
    """Tests for compiled pattern sets."""

    def test_any_pattern_matches(self):
        spec = compile_patterns(("*.css", "vendor/"))
        assert spec_matches(spec, "b.css")
        assert spec_matches(spec, "vendor/jquery.js")
        assert not spec_matches(spec, "src/app.js")

    def test_braces_expanded(self):
        spec = compile_patterns(("**/*.{js,css}",))
        assert spec_matches(spec, "a/b.css")
        assert not spec_matches(spec, "a/b.html")

    def test_negation_reincludes(self):
        spec = compile_patterns(("**/*.js", "!keep.js"))
        assert spec_matches(spec, "drop.js")
        assert not spec_matches(spec, "keep.js")

    def test_compiled_once(self):
        assert compile_patterns(("a.js",)) is compile_patterns(("a.js",))
