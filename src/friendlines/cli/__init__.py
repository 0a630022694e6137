"""Command-line interface for the AI Reporter."""

from .app import app

__all__ = ["app"]
