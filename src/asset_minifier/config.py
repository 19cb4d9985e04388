"""Configuration management for the Asset Minifier CLI."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

# Conditional import for Python 3.10 compatibility
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]


@dataclass
class DefaultsConfig:
    """Default run behavior."""

    dry_run: bool = False
    verbose: bool = True
    jobs: int = 1


@dataclass
class JsConfig:
    """JavaScript minifier settings."""

    drop_console: bool = False
    mangle: bool = True


@dataclass
class HtmlConfig:
    """HTML minifier settings."""

    collapse_whitespace: bool = True
    remove_comments: bool = True
    remove_redundant_attributes: bool = True
    use_short_doctype: bool = True
    minify_css: bool = True
    minify_js: bool = True


@dataclass
class OutputConfig:
    """Where minified files and source maps go. Empty strings mean unset."""

    output_dir: str = ""
    source_map: bool = False
    source_map_dir: str = ""


@dataclass
class IgnoreConfig:
    """Extra ignore patterns and ignore file location."""

    patterns: list[str] = field(default_factory=list)
    ignore_path: str = ""


@dataclass
class Config:
    """Root configuration container."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    js: JsConfig = field(default_factory=JsConfig)
    html: HtmlConfig = field(default_factory=HtmlConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    ignore: IgnoreConfig = field(default_factory=IgnoreConfig)

    # Metadata (not from TOML)
    _source: Path | None = field(default=None, repr=False)


# Mapping of section names to their config classes
SECTION_TYPES = {
    "defaults": DefaultsConfig,
    "js": JsConfig,
    "html": HtmlConfig,
    "output": OutputConfig,
    "ignore": IgnoreConfig,
}


def get_xdg_config_home() -> Path:
    """Get XDG config home, respecting environment variable."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def get_config_paths() -> tuple[Path, Path]:
    """
    Get config file paths in priority order.

    Returns:
        (xdg_path, cwd_path) - XDG is base, CWD overrides
    """
    xdg_path = get_xdg_config_home() / "asset-minifier" / "config.toml"
    cwd_path = Path.cwd() / "minifier.toml"
    return xdg_path, cwd_path


def _load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file."""
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, override takes precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def _validate_config(data: dict[str, Any]) -> list[str]:
    """Validate TOML data and return list of errors."""
    errors: list[str] = []

    for section_name, cls in SECTION_TYPES.items():
        section = data.get(section_name, {})
        if not isinstance(section, dict):
            errors.append(f"[{section_name}] must be a table")
            continue
        for f in fields(cls):
            if f.name not in section:
                continue
            value = section[f.name]
            expected = f.type if isinstance(f.type, str) else f.type.__name__
            if expected == "bool" and not isinstance(value, bool):
                errors.append(f"Invalid {section_name}.{f.name}: {value!r} (use: true, false)")
            elif expected == "str" and not isinstance(value, str):
                errors.append(f"Invalid {section_name}.{f.name}: {value!r} (expected a string)")

    jobs = data.get("defaults", {}).get("jobs") if isinstance(data.get("defaults"), dict) else None
    if jobs is not None and (isinstance(jobs, bool) or not isinstance(jobs, int) or jobs < 1):
        errors.append(f"Invalid defaults.jobs: {jobs!r} (use a positive integer)")

    patterns = data.get("ignore", {}).get("patterns") if isinstance(data.get("ignore"), dict) else None
    if patterns is not None and (
        not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns)
    ):
        errors.append("Invalid ignore.patterns: expected a list of strings")

    return errors


def _filter_known_keys(data: dict[str, Any], dataclass_type: type) -> dict[str, Any]:
    """Filter dict to only include keys that are valid fields for the dataclass."""
    valid_fields = {f.name for f in fields(dataclass_type)}
    return {k: v for k, v in data.items() if k in valid_fields}


def _dict_to_config(data: dict[str, Any], source: Path | None = None) -> Config:
    """Convert parsed TOML dict to Config dataclass."""
    sections = {
        name: cls(**_filter_known_keys(data.get(name, {}), cls))
        for name, cls in SECTION_TYPES.items()
    }
    return Config(**sections, _source=source)


def load_config() -> Config:
    """
    Load configuration with XDG + CWD override precedence.

    Priority (highest to lowest):
    1. ./minifier.toml (CWD override)
    2. ~/.config/asset-minifier/config.toml (XDG base)
    3. Built-in defaults

    Returns:
        Merged Config instance

    Raises:
        ValueError: If TOML syntax is invalid in either config file
    """
    xdg_path, cwd_path = get_config_paths()

    merged_data: dict[str, Any] = {}
    active_source: Path | None = None

    # Load XDG config if exists
    if xdg_path.exists():
        try:
            merged_data = _load_toml(xdg_path)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {xdg_path}: {e}") from e
        active_source = xdg_path

    # Merge CWD config if exists (overrides XDG)
    if cwd_path.exists():
        try:
            cwd_data = _load_toml(cwd_path)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {cwd_path}: {e}") from e
        merged_data = _merge_dicts(merged_data, cwd_data)
        active_source = cwd_path

    # Validate merged config data
    if merged_data:
        errors = _validate_config(merged_data)
        if errors:
            raise ValueError(f"Config validation failed ({active_source}): {'; '.join(errors)}")

    return _dict_to_config(merged_data, active_source)


def load_config_from_file(path: Path) -> Config:
    """Load configuration from a specific file."""
    try:
        data = _load_toml(path)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e
    errors = _validate_config(data)
    if errors:
        raise ValueError(f"Config validation failed: {'; '.join(errors)}")
    return _dict_to_config(data, path)


# Default config template for `config init`
DEFAULT_CONFIG_TEMPLATE = """\
# Asset Minifier Configuration
# Command-line options override these values.

[defaults]
dry_run = false         # Report what would change without writing
verbose = true          # Also report ignored and unchanged files
jobs = 1                # Files minified in parallel

[js]
drop_console = false    # Remove console.* calls
mangle = true           # Shorten local variable and function names

[html]
collapse_whitespace = true
remove_comments = true
remove_redundant_attributes = true
use_short_doctype = true
minify_css = true       # Minify inline <style> blocks
minify_js = true        # Minify inline <script> blocks

[output]
output_dir = ""         # e.g. "dist" or "dist/**/*.min.js"; empty = overwrite in place
source_map = false      # Write .map files for JavaScript
source_map_dir = ""     # Relative to each source file; empty = next to the output

[ignore]
patterns = []           # Extra glob patterns, e.g. ["vendor/", "**/*.min.js"]
ignore_path = ""        # Ignore file; empty = .minifierignore in the target directory
"""
