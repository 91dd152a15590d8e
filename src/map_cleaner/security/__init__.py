"""Sandboxing primitives for destructive file operations."""

from .paths import PathBlockedError, ensure_within_root

__all__ = ["PathBlockedError", "ensure_within_root"]
