"""Whole-collection caches: compute once, serialize once.

A persistent cache holds one collection (a list or an ordered dict) derived
from the data source by an extractor callable. The first access in a run
loads it from its cache file when one exists and otherwise runs the
extractor and writes the file. Once resident the collection is immutable for
the rest of the run.

Usage:
    commit_counts = PersistentMap(CacheName.PROJECT_COMMIT_COUNT, count_commits, cache_dir)
    counts = commit_counts.get_or_compute(source, project_commits)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

from ..exceptions import CacheCorruptError, CacheError, CacheIOError
from ..logging_config import get_logger, log_event
from .cache_names import CACHE_EXTENSION, CacheName
from .codec import read_file, write_file

logger = get_logger(__name__)

C = TypeVar("C")

MAX_EXTRACTOR_ARGS = 4


class PersistentCache(Generic[C]):
    """Base for persistent collections; subclasses fix the collection shape."""

    kind = "collection"

    def __init__(
        self,
        name: Union[CacheName, str],
        extract: Callable[..., Any],
        cache_dir: Optional[Union[str, Path]] = None,
    ):
        """
        Args:
            name: Logical collection name; the file is ``<cache_dir>/<name>.cbor``
            extract: ``extract(source, *args)`` computing the collection
            cache_dir: Directory for the cache file, or None for no persistence
        """
        self.name = str(name)
        self.extract = extract
        self._cache_dir = Path(cache_dir) if cache_dir is not None else None
        self._value: Optional[C] = None
        self._load_failed = False

    def without_cache(self) -> "PersistentCache[C]":
        """Never read or write a cache file; memoize in memory only."""
        self._cache_dir = None
        return self

    @property
    def path(self) -> Optional[Path]:
        if self._cache_dir is None:
            return None
        return self._cache_dir / (self.name + CACHE_EXTENSION)

    @property
    def is_resident(self) -> bool:
        return self._value is not None

    def get_or_compute(self, source: Any, *args: Any) -> C:
        """Return the collection, loading or computing it on first use."""
        if self._value is not None:
            return self._value

        if len(args) > MAX_EXTRACTOR_ARGS:
            raise TypeError(
                f"{self.name}: extractors take at most {MAX_EXTRACTOR_ARGS} "
                f"auxiliary arguments, got {len(args)}"
            )

        cached = self.try_load()
        if cached is not None:
            return cached

        path = self.path
        with log_event(logger, f"loading {self.name} from source") as event:
            value = self._adopt(self.extract(source, *args))
            event.counted(len(value))
            event.weighed(value)

        if path is not None:
            try:
                self.store_to_cache()
            except CacheError as e:
                logger.warning(f"Cannot store cache {path}: {e.reason}")

        return value

    def try_load(self) -> Optional[C]:
        """Return the resident or cached collection, or None if it must be computed.

        An unreadable or corrupt file is logged and not retried during this run.
        """
        if self._value is not None:
            return self._value
        path = self.path
        if path is None or self._load_failed or not path.exists():
            return None
        try:
            return self.load_from_cache()
        except CacheCorruptError as e:
            logger.warning(f"Discarding corrupt cache {path}: {e.reason}")
        except CacheIOError as e:
            logger.warning(f"Cannot read cache {path}, recomputing: {e.reason}")
        self._load_failed = True
        return None

    def load_from_cache(self) -> C:
        """Read the collection from its cache file and make it resident.

        Raises:
            CacheIOError: If there is no cache file or it cannot be read
            CacheCorruptError: If the file does not hold a valid collection
        """
        path = self.path
        if path is None:
            raise CacheIOError(None, f"{self.name}: caching is disabled")

        with log_event(logger, f"loading {self.name} from cache") as event:
            raw = read_file(path)
            if not self._accepts(raw):
                raise CacheCorruptError(
                    path, f"expected a {self.kind}, found {type(raw).__name__}"
                )
            value = self._adopt(raw)
            event.counted(len(value))
            event.weighed(value)
        return value

    def store_to_cache(self) -> None:
        """Write the resident collection to its cache file.

        Raises:
            CacheIOError: If caching is disabled, nothing is resident, or the
                write fails
        """
        path = self.path
        if path is None:
            raise CacheIOError(None, f"{self.name}: caching is disabled")
        if self._value is None:
            raise CacheIOError(path, f"{self.name}: nothing to store")

        with log_event(logger, f"storing {self.name} into cache") as event:
            write_file(path, self._value)
            event.counted(len(self._value))

    def _adopt(self, value: Any) -> C:
        self._value = self._normalize(value)
        return self._value

    def _accepts(self, raw: Any) -> bool:
        raise NotImplementedError

    def _normalize(self, value: Any) -> C:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, path={self.path})"


class PersistentVector(PersistentCache[List[Any]]):
    """A cached list."""

    kind = "list"

    def _accepts(self, raw: Any) -> bool:
        return isinstance(raw, list)

    def _normalize(self, value: Any) -> List[Any]:
        return list(value)


class PersistentMap(PersistentCache[Dict[Any, Any]]):
    """A cached dict, iterated in ascending key order."""

    kind = "map"

    def _accepts(self, raw: Any) -> bool:
        return isinstance(raw, dict)

    def _normalize(self, value: Any) -> Dict[Any, Any]:
        items = value.items() if isinstance(value, dict) else value
        return dict(sorted(items, key=lambda kv: kv[0]))
