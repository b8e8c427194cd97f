"""Local cache persistence."""

from .manager import CacheCorruptionError, CacheManager

__all__ = ["CacheCorruptionError", "CacheManager"]
