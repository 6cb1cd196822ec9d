"""HTTP API for the binding engine."""

from .app import create_app

__all__ = ["create_app"]
