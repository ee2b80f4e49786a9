"""The database: one data source plus every named cache derived from it.

Entities reach queries wrapped in `ItemWithData` envelopes that point back
here, so attributes can ask for derived facts (commit counts, message
lengths, experience...) which are computed on first use and cached.

Usage:
    with Database.from_config(InMemorySource.from_json("snapshot.json"), config) as db:
        for row in db.projects().sort_by(project.Stars).sample(Top(10)):
            ...
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from ..config import QueryConfig
from ..exceptions import CacheError
from ..logging_config import get_logger
from ..objects import (
    Change,
    Commit,
    CommitId,
    Head,
    ItemWithData,
    Path as PathEntity,
    PathId,
    Project,
    ProjectId,
    Snapshot,
    SnapshotId,
    User,
    UserId,
)
from ..source import DataSource
from . import extractors
from .cache_names import CACHE_EXTENSION, CacheName
from .lazy import LazyMap
from .persistent import PersistentCache, PersistentMap, PersistentVector

logger = get_logger(__name__)

N = CacheName

# name -> (collection type, extractor, prerequisite collections)
_COLLECTIONS: Dict[CacheName, Tuple[type, Callable[..., Any], Tuple[CacheName, ...]]] = {
    N.PROJECT_IDS: (PersistentVector, extractors.project_ids, ()),
    N.COMMIT_IDS: (PersistentVector, extractors.commit_ids, ()),
    N.USER_IDS: (PersistentVector, extractors.user_ids, ()),
    N.PATH_IDS: (PersistentVector, extractors.path_ids, ()),

    N.PROJECTS: (PersistentMap, extractors.projects, ()),
    N.PROJECT_HEADS: (PersistentMap, extractors.project_heads, ()),
    N.PROJECT_METADATA: (PersistentMap, extractors.project_metadata, ()),
    N.PROJECT_COMMITS: (PersistentMap, extractors.project_commits, (N.PROJECT_HEADS, N.COMMITS)),
    N.PROJECT_COMMIT_COUNT: (PersistentMap, extractors.count_per_key, (N.PROJECT_COMMITS,)),
    N.PROJECT_AUTHORS: (PersistentMap, extractors.project_authors, (N.PROJECT_COMMITS, N.COMMITS)),
    N.PROJECT_COMMITTERS: (PersistentMap, extractors.project_committers, (N.PROJECT_COMMITS, N.COMMITS)),
    N.PROJECT_USERS: (PersistentMap, extractors.merge_members, (N.PROJECT_AUTHORS, N.PROJECT_COMMITTERS)),
    N.PROJECT_PATHS: (PersistentMap, extractors.project_paths, (N.PROJECT_COMMITS, N.COMMIT_CHANGES)),
    N.PROJECT_LIFETIME: (
        PersistentMap,
        extractors.time_span,
        (N.PROJECT_COMMITS, N.COMMIT_AUTHOR_TIMESTAMPS, N.COMMIT_COMMITTER_TIMESTAMPS),
    ),
    N.PROJECT_MAX_EXPERIENCE: (
        PersistentMap,
        extractors.project_max_experience,
        (N.PROJECT_AUTHORS, N.USER_EXPERIENCE),
    ),

    N.USERS: (PersistentMap, extractors.users, ()),
    N.USER_AUTHORED_COMMITS: (PersistentMap, extractors.user_authored_commits, (N.COMMITS,)),
    N.USER_COMMITTED_COMMITS: (PersistentMap, extractors.user_committed_commits, (N.COMMITS,)),
    N.USER_COMMITS: (
        PersistentMap,
        extractors.merge_members,
        (N.USER_AUTHORED_COMMITS, N.USER_COMMITTED_COMMITS),
    ),
    N.USER_AUTHOR_EXPERIENCE: (
        PersistentMap,
        extractors.time_span,
        (N.USER_AUTHORED_COMMITS, N.COMMIT_AUTHOR_TIMESTAMPS),
    ),
    N.USER_COMMITTER_EXPERIENCE: (
        PersistentMap,
        extractors.time_span,
        (N.USER_COMMITTED_COMMITS, N.COMMIT_COMMITTER_TIMESTAMPS),
    ),
    N.USER_EXPERIENCE: (
        PersistentMap,
        extractors.time_span,
        (N.USER_COMMITS, N.COMMIT_AUTHOR_TIMESTAMPS, N.COMMIT_COMMITTER_TIMESTAMPS),
    ),

    N.PATHS: (PersistentMap, extractors.paths, ()),

    N.COMMITS: (PersistentMap, extractors.commits, ()),
    N.COMMIT_MESSAGES: (PersistentMap, extractors.commit_messages, ()),
    N.COMMIT_AUTHOR_TIMESTAMPS: (PersistentMap, extractors.commit_author_timestamps, ()),
    N.COMMIT_COMMITTER_TIMESTAMPS: (PersistentMap, extractors.commit_committer_timestamps, ()),
    N.COMMIT_CHANGES: (PersistentMap, extractors.commit_changes, ()),
}

_DERIVATIONS = (N.COMMIT_HISTORY_DEPTH, N.COMMIT_CUMULATIVE_CHANGES)


class Database:
    """Entry point for queries over one dataset snapshot.

    Persistent collections are written as soon as they are computed;
    incremental derivations are written when the database is closed.
    """

    def __init__(self, source: DataSource, cache_dir: Optional[Union[str, Path]] = None):
        """
        Args:
            source: The dataset snapshot
            cache_dir: Directory for cache files; None disables persistence
        """
        self.source = source
        self.cache_dir = Path(cache_dir) if cache_dir is not None else None
        self._closed = False

        self._collections: Dict[CacheName, PersistentCache] = {
            name: kind(name, extract, self.cache_dir)
            for name, (kind, extract, _) in _COLLECTIONS.items()
        }
        self._derivations: Dict[CacheName, LazyMap] = {
            name: LazyMap(name, self.cache_dir) for name in _DERIVATIONS
        }

        if self.cache_dir is None:
            logger.debug(f"Database for {source.descriptor}: caching disabled")
        else:
            logger.debug(f"Database for {source.descriptor}: caches in {self.cache_dir}")

    @classmethod
    def from_config(cls, source: DataSource, config: QueryConfig) -> "Database":
        return cls(source, config.cache_root(source.descriptor))

    @property
    def descriptor(self) -> str:
        return self.source.descriptor

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.close()
            return
        # Leave the query's own exception in charge.
        try:
            self.close()
        except CacheError as e:
            logger.warning(f"Cannot flush caches after a failed query: {e}")

    def flush(self) -> None:
        """Write incremental derivations that gained values this run.

        Raises:
            CacheIOError: If a cache file cannot be written
        """
        for derivation in self._derivations.values():
            derivation.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.flush()

    def cache_path(self, name: CacheName) -> Optional[Path]:
        """File backing the named cache, whether or not it exists yet."""
        if self.cache_dir is None:
            return None
        return self.cache_dir / (name.value + CACHE_EXTENSION)

    def cache_files(self) -> List[Path]:
        """Cache files currently present in the cache directory."""
        if self.cache_dir is None or not self.cache_dir.is_dir():
            return []
        return sorted(self.cache_dir.glob("*" + CACHE_EXTENSION))

    def _collection(self, name: CacheName) -> Any:
        cache = self._collections[name]
        value = cache.try_load()
        if value is not None:
            return value
        _, _, prerequisites = _COLLECTIONS[name]
        arguments = [self._collection(p) for p in prerequisites]
        return cache.get_or_compute(self.source, *arguments)

    # Entity streams

    def projects(self):
        return self._stream(N.PROJECT_IDS, N.PROJECTS)

    def commits(self):
        return self._stream(N.COMMIT_IDS, N.COMMITS)

    def users(self):
        return self._stream(N.USER_IDS, N.USERS)

    def paths(self):
        return self._stream(N.PATH_IDS, N.PATHS)

    def _stream(self, ids: CacheName, entities: CacheName):
        from ..query import Stream

        def pull() -> Iterator[ItemWithData]:
            lookup = self._collection(entities)
            for id in self._collection(ids):
                entity = lookup.get(id)
                if entity is not None:
                    yield ItemWithData(self, entity)

        return Stream(self, pull())

    def project_ids(self) -> List[ProjectId]:
        return list(self._collection(N.PROJECT_IDS))

    def commit_ids(self) -> List[CommitId]:
        return list(self._collection(N.COMMIT_IDS))

    def user_ids(self) -> List[UserId]:
        return list(self._collection(N.USER_IDS))

    def path_ids(self) -> List[PathId]:
        return list(self._collection(N.PATH_IDS))

    # Point lookups

    def project(self, id: ProjectId) -> Optional[Project]:
        return self._collection(N.PROJECTS).get(id)

    def commit(self, id: CommitId) -> Optional[Commit]:
        return self._collection(N.COMMITS).get(id)

    def user(self, id: UserId) -> Optional[User]:
        return self._collection(N.USERS).get(id)

    def path(self, id: PathId) -> Optional[PathEntity]:
        return self._collection(N.PATHS).get(id)

    def snapshot(self, id: SnapshotId) -> Optional[Snapshot]:
        return self.source.snapshot(id)

    # Project facts

    def project_heads(self, id: ProjectId) -> Optional[List[Head]]:
        return self._collection(N.PROJECT_HEADS).get(id)

    def project_metadata(self, id: ProjectId, key: str) -> Optional[Any]:
        metadata = self._collection(N.PROJECT_METADATA).get(id)
        if metadata is None:
            return None
        return metadata.get(key)

    def project_commit_ids(self, id: ProjectId) -> Optional[List[CommitId]]:
        return self._collection(N.PROJECT_COMMITS).get(id)

    def project_commit_count(self, id: ProjectId) -> Optional[int]:
        return self._collection(N.PROJECT_COMMIT_COUNT).get(id)

    def project_author_ids(self, id: ProjectId) -> Optional[List[UserId]]:
        return self._collection(N.PROJECT_AUTHORS).get(id)

    def project_committer_ids(self, id: ProjectId) -> Optional[List[UserId]]:
        return self._collection(N.PROJECT_COMMITTERS).get(id)

    def project_user_ids(self, id: ProjectId) -> Optional[List[UserId]]:
        return self._collection(N.PROJECT_USERS).get(id)

    def project_path_ids(self, id: ProjectId) -> Optional[List[PathId]]:
        return self._collection(N.PROJECT_PATHS).get(id)

    def project_lifetime(self, id: ProjectId) -> Optional[int]:
        """Seconds between the project's first and last commit timestamps."""
        return self._collection(N.PROJECT_LIFETIME).get(id)

    def project_max_experience(self, id: ProjectId) -> Optional[int]:
        return self._collection(N.PROJECT_MAX_EXPERIENCE).get(id)

    # Commit facts

    def commit_message(self, id: CommitId) -> Optional[str]:
        return self._collection(N.COMMIT_MESSAGES).get(id)

    def commit_author_timestamp(self, id: CommitId) -> Optional[int]:
        return self._collection(N.COMMIT_AUTHOR_TIMESTAMPS).get(id)

    def commit_committer_timestamp(self, id: CommitId) -> Optional[int]:
        return self._collection(N.COMMIT_COMMITTER_TIMESTAMPS).get(id)

    def commit_changes(self, id: CommitId) -> Optional[List[Change]]:
        return self._collection(N.COMMIT_CHANGES).get(id)

    def commit_history_depth(self, id: CommitId) -> Optional[int]:
        """Number of first-parent ancestors of the commit."""
        commits = self._collection(N.COMMITS)
        if id not in commits:
            return None
        return self._derivations[N.COMMIT_HISTORY_DEPTH].get_or(
            id,
            lambda c: extractors.first_parent(commits, c),
            lambda c, depth: 0 if depth is None else depth + 1,
        )

    def commit_cumulative_change_count(self, id: CommitId) -> Optional[int]:
        """Changes made by the commit and all of its first-parent ancestors."""
        commits = self._collection(N.COMMITS)
        if id not in commits:
            return None
        changes = self._collection(N.COMMIT_CHANGES)
        return self._derivations[N.COMMIT_CUMULATIVE_CHANGES].get_or(
            id,
            lambda c: extractors.first_parent(commits, c),
            lambda c, total: (total or 0) + len(changes.get(c, [])),
        )

    # User facts

    def user_authored_commit_ids(self, id: UserId) -> Optional[List[CommitId]]:
        return self._collection(N.USER_AUTHORED_COMMITS).get(id)

    def user_committed_commit_ids(self, id: UserId) -> Optional[List[CommitId]]:
        return self._collection(N.USER_COMMITTED_COMMITS).get(id)

    def user_author_experience(self, id: UserId) -> Optional[int]:
        return self._collection(N.USER_AUTHOR_EXPERIENCE).get(id)

    def user_committer_experience(self, id: UserId) -> Optional[int]:
        return self._collection(N.USER_COMMITTER_EXPERIENCE).get(id)

    def user_experience(self, id: UserId) -> Optional[int]:
        """Seconds between the user's earliest and latest commit activity."""
        return self._collection(N.USER_EXPERIENCE).get(id)

    def __repr__(self) -> str:
        return f"Database({self.descriptor!r})"
