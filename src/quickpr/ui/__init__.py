"""Terminal output helpers."""

from quickpr.ui.console import Console

__all__ = ["Console"]
