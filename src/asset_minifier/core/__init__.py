"""Core traversal, ignore matching, output planning, and minification."""

from __future__ import annotations

from .analyzer import Analyzer
from .processor import process_file
from .runner import Minifier
from .walker import traverse

__all__ = ["Minifier", "Analyzer", "process_file", "traverse"]
