"""Database and cache layer."""

from .cache_names import CacheName
from .database import Database
from .lazy import LazyMap
from .persistent import PersistentCache, PersistentMap, PersistentVector
from .weights import weigh

__all__ = [
    "CacheName",
    "Database",
    "LazyMap",
    "PersistentCache",
    "PersistentMap",
    "PersistentVector",
    "weigh",
]
