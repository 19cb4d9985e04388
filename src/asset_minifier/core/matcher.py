"""Glob-style path matching on forward-slash relative paths, backed by pathspec."""

from __future__ import annotations

from functools import lru_cache

import pathspec


def normalize_path(path: str) -> str:
    """Normalize a relative path to forward slashes without a leading ``./``."""
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def expand_braces(pattern: str) -> list[str]:
    """
    Expand ``{a,b,c}`` groups into alternative patterns.

    Groups nest, and a group without a top-level comma is kept literally.

    Examples:
        >>> expand_braces("*.{js,css}")
        ['*.js', '*.css']
    """
    depth = 0
    start = -1
    for i, char in enumerate(pattern):
        if char == "{":
            if depth == 0:
                start = i
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                options = _split_top_level(pattern[start + 1 : i])
                if len(options) < 2:
                    # Literal braces: keep them and expand the remainder
                    head = pattern[: i + 1]
                    return [head + rest for rest in expand_braces(pattern[i + 1 :])]
                prefix, suffix = pattern[:start], pattern[i + 1 :]
                expanded: list[str] = []
                for option in options:
                    for alternative in expand_braces(prefix + option + suffix):
                        if alternative not in expanded:
                            expanded.append(alternative)
                return expanded
    return [pattern]


def _split_top_level(body: str) -> list[str]:
    """Split a brace body on commas that are not inside nested braces."""
    parts: list[str] = []
    depth = 0
    current = ""
    for char in body:
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += char
    parts.append(current)
    return parts


def anchor(pattern: str) -> str:
    """
    Root a pattern at the base directory.

    Gitignore semantics let a slash-free pattern match at any depth; here
    every pattern is relative to the base path, so ``b.css`` names only the
    top-level file and ``**/b.css`` is needed to match it anywhere.
    """
    negated = pattern.startswith("!")
    body = normalize_path(pattern[1:] if negated else pattern)
    if not body.startswith("/"):
        body = "/" + body
    return f"!{body}" if negated else body


@lru_cache(maxsize=256)
def compile_patterns(patterns: tuple[str, ...]) -> pathspec.PathSpec:
    """Build one PathSpec from glob patterns, expanding brace alternatives."""
    lines = [anchor(alternative) for pattern in patterns for alternative in expand_braces(pattern)]
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def spec_matches(spec: pathspec.PathSpec, relative_path: str) -> bool:
    """
    Check a relative path against a compiled PathSpec.

    The path is tried both as a file and as a directory (with a trailing
    ``/``), so ``vendor/`` matches the ``vendor`` directory itself and the
    pattern's implicit ``/**`` covers everything beneath it.
    """
    path = normalize_path(relative_path).rstrip("/")
    return spec.match_file(path) or spec.match_file(f"{path}/")


def matches(relative_path: str, pattern: str) -> bool:
    """Check whether a relative path matches a glob pattern."""
    return spec_matches(compile_patterns((pattern,)), relative_path)
