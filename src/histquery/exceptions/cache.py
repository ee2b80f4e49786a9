"""Cache-related exceptions: file access and deserialization failures."""

from pathlib import Path
from typing import Optional

from .base import HistQueryError


class CacheError(HistQueryError):
    """Base class for failures involving a cache file."""

    hint = "Run 'histquery cache-clear' to discard the cache files for this dataset."

    def __init__(self, message: str, path: Optional[Path], reason: str):
        super().__init__(message, details={"reason": reason, "path": path})
        self.path = path
        self.reason = reason


class CacheIOError(CacheError):
    """Raised when a cache file cannot be created, opened, read or written."""

    def __init__(self, path: Optional[Path], reason: str):
        super().__init__(f"Cache file I/O failed: {path}", path, reason)


class CacheCorruptError(CacheError):
    """Raised when an existing cache file cannot be deserialized."""

    def __init__(self, path: Optional[Path], reason: str):
        super().__init__(f"Cache file is corrupt: {path}", path, reason)
