"""
histquery - Attribute-driven queries over software-repository history

Group, filter, sort, sample and project repositories, commits and users of a
static history snapshot. Expensive derived facts are cached on disk, so
repeated queries over the same snapshot skip the whole-history scans.
"""

__version__ = "0.1.0"

from .config import QueryConfig, load_config
from .database import Database
from .objects import ItemWithData
from .query import Direction, GroupedStream, Stream
from .source import DataSource, InMemorySource

__all__ = [
    "Database",  # Main entry point
    "DataSource",
    "InMemorySource",
    "ItemWithData",
    "Stream",
    "GroupedStream",
    "Direction",
    "QueryConfig",
    "load_config",
]
