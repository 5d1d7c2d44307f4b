"""Command-line interface for bemorder."""

from .app import app

__all__ = ["app"]
