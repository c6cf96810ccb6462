"""CLI commands for huesync."""

from .color import color
from .config import config
from .parse import parse

__all__ = ["color", "config", "parse"]
