"""Per-key memoized derivations computed incrementally along a chain.

A `LazyMap` caches one value per key. Values may depend on the value of a
single predecessor key (a commit's first parent, say), so asking for a key
whose ancestors are partially cached computes only the missing suffix of the
chain, oldest first, and remembers every intermediate result.

The whole map is loaded from its cache file on first access and written back
by `flush()` when new values were computed during the run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Generic, Hashable, List, Optional, TypeVar, Union

from ..exceptions import CacheCorruptError, CacheIOError
from ..logging_config import get_logger, log_event
from .cache_names import CACHE_EXTENSION, CacheName
from .codec import read_file, write_file

logger = get_logger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class LazyMap(Generic[K, V]):
    """Incrementally populated key/value cache backed by one CBOR file."""

    def __init__(self, name: Union[CacheName, str], cache_dir: Optional[Union[str, Path]] = None):
        self.name = str(name)
        self._cache_dir = Path(cache_dir) if cache_dir is not None else None
        self._values: Dict[K, V] = {}
        self._loaded = False
        self._dirty = False

    def without_cache(self) -> "LazyMap[K, V]":
        """Keep values in memory only; `flush()` becomes a no-op."""
        self._cache_dir = None
        return self

    @property
    def path(self) -> Optional[Path]:
        if self._cache_dir is None:
            return None
        return self._cache_dir / (self.name + CACHE_EXTENSION)

    @property
    def dirty(self) -> bool:
        """True when values were computed since the last load or flush."""
        return self._dirty

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        self._ensure_loaded()
        return key in self._values

    def get(self, key: K, extract: Callable[[K], V]) -> V:
        """Return the value for `key`, computing ``extract(key)`` on a miss."""
        self._ensure_loaded()
        if key in self._values:
            return self._values[key]
        value = extract(key)
        self._values[key] = value
        self._dirty = True
        return value

    def get_or(
        self,
        key: K,
        previous: Callable[[K], Optional[K]],
        extract: Callable[[K, Optional[V]], V],
    ) -> V:
        """Return the value for `key`, deriving it from its nearest cached ancestor.

        Args:
            key: Key to look up
            previous: Pure function giving a key's predecessor, or None at a root
            extract: ``extract(k, value_of_predecessor)``; the predecessor value
                is None at a root

        Raises:
            ValueError: If `previous` leads back to a key already on the walk
        """
        self._ensure_loaded()
        if key in self._values:
            return self._values[key]

        walk: List[K] = []
        on_walk = set()
        candidate: Optional[K] = key
        while candidate is not None and candidate not in self._values:
            if candidate in on_walk:
                raise ValueError(f"{self.name}: cycle in predecessor chain at {candidate!r}")
            on_walk.add(candidate)
            walk.append(candidate)
            candidate = previous(candidate)

        value: Optional[V] = self._values[candidate] if candidate is not None else None
        for step in reversed(walk):
            value = extract(step, value)
            self._values[step] = value
        self._dirty = True
        return value

    def flush(self) -> bool:
        """Write the map to its cache file if anything new was computed.

        Returns:
            True if the file was written

        Raises:
            CacheIOError: If the file cannot be written
        """
        path = self.path
        if path is None or not self._dirty:
            return False
        with log_event(logger, f"storing {self.name} into cache") as event:
            write_file(path, self._values)
            event.counted(len(self._values))
        self._dirty = False
        return True

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True

        path = self.path
        if path is None or not path.exists():
            return

        try:
            with log_event(logger, f"loading {self.name} from cache") as event:
                raw = read_file(path)
                if not isinstance(raw, dict):
                    raise CacheCorruptError(path, f"expected a map, found {type(raw).__name__}")
                event.counted(len(raw))
                event.weighed(raw)
        except CacheCorruptError as e:
            logger.warning(f"Discarding corrupt cache {path}: {e.reason}")
            self._dirty = True
            return
        except CacheIOError as e:
            logger.warning(f"Cannot read cache {path}, recomputing: {e.reason}")
            # The file may still hold values this run cannot see; never overwrite it.
            self._cache_dir = None
            return

        self._values = raw

    def __repr__(self) -> str:
        return f"LazyMap({self.name!r}, path={self.path})"
