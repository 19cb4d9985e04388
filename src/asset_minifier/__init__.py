"""Asset Minifier - recursively minify JavaScript, CSS, and HTML assets."""

from __future__ import annotations

__version__ = "1.1.0"
