"""Utility modules for huesync."""

from .locks import ReadWriteLock

__all__ = ["ReadWriteLock"]
