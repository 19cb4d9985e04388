"""UI components for console output."""

from __future__ import annotations

from .console import configure_logging, create_console, print_banner

__all__ = ["create_console", "configure_logging", "print_banner"]
