"""Command-line interface for huesync."""

from .main import cli

__all__ = ["cli"]
