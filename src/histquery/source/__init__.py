"""Dataset snapshots the database reads from."""

from .base import DataSource
from .memory import InMemorySource

__all__ = ["DataSource", "InMemorySource"]
