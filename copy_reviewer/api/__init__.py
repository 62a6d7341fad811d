"""FastAPI interface for copy review."""

from .app import app

__all__ = ["app"]
