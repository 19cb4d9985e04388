"""Exceptions raised by the minification pipeline."""

from __future__ import annotations

from pathlib import Path


class MinifierError(Exception):
    """Base class for minifier errors."""

    pass


class MinifyError(MinifierError):
    """The external minifier rejected the input."""

    pass


class TargetNotFoundError(MinifierError):
    """The path given on the command line does not exist."""

    def __init__(self, path: Path):
        super().__init__(f"The path '{path}' does not exist.")
        self.path = path


class InvalidTargetError(MinifierError):
    """The path given on the command line is neither a file nor a directory."""

    def __init__(self, path: Path):
        super().__init__(f"The path '{path}' is not a valid file or directory.")
        self.path = path
