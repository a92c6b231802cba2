"""Run-scoped storage helpers."""

from .run_cache import RunCache

__all__ = ["RunCache"]
