"""Exception hierarchy for histquery."""

from .base import HistQueryError
from .cache import CacheCorruptError, CacheError, CacheIOError
from .config import ConfigurationError
from .query import QueryError, SourceUnavailableError

__all__ = [
    "HistQueryError",
    "CacheError",
    "CacheIOError",
    "CacheCorruptError",
    "ConfigurationError",
    "QueryError",
    "SourceUnavailableError",
]
