"""HTTP surface for the AI Reporter."""

from .app import create_app

__all__ = ["create_app"]
