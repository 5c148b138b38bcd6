"""Journal API routes."""

from . import gps, sync

__all__ = ["gps", "sync"]
