"""Abstract dataset snapshot consulted by the database on cache misses."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional

from ..objects import (
    Change,
    Commit,
    CommitId,
    Head,
    Path,
    PathId,
    Project,
    ProjectId,
    Snapshot,
    SnapshotId,
    User,
    UserId,
)


class DataSource(ABC):
    """Read-only view of one immutable repository-history snapshot.

    Point lookups return None for unknown ids. A source that cannot answer at
    all raises SourceUnavailableError.
    """

    @property
    @abstractmethod
    def descriptor(self) -> str:
        """String identifying the snapshot, used to bind caches to it."""

    # Enumeration

    @abstractmethod
    def project_ids(self) -> Iterator[ProjectId]: ...

    @abstractmethod
    def commit_ids(self) -> Iterator[CommitId]: ...

    @abstractmethod
    def user_ids(self) -> Iterator[UserId]: ...

    @abstractmethod
    def path_ids(self) -> Iterator[PathId]: ...

    def project_count(self) -> int:
        return sum(1 for _ in self.project_ids())

    def commit_count(self) -> int:
        return sum(1 for _ in self.commit_ids())

    def user_count(self) -> int:
        return sum(1 for _ in self.user_ids())

    def path_count(self) -> int:
        return sum(1 for _ in self.path_ids())

    # Point lookups

    @abstractmethod
    def project(self, id: ProjectId) -> Optional[Project]: ...

    @abstractmethod
    def commit(self, id: CommitId) -> Optional[Commit]: ...

    @abstractmethod
    def user(self, id: UserId) -> Optional[User]: ...

    @abstractmethod
    def path(self, id: PathId) -> Optional[Path]: ...

    @abstractmethod
    def snapshot(self, id: SnapshotId) -> Optional[Snapshot]: ...

    # Raw accessors

    @abstractmethod
    def commit_message(self, id: CommitId) -> Optional[str]: ...

    @abstractmethod
    def commit_author_timestamp(self, id: CommitId) -> Optional[int]: ...

    @abstractmethod
    def commit_committer_timestamp(self, id: CommitId) -> Optional[int]: ...

    @abstractmethod
    def commit_changes(self, id: CommitId) -> Optional[List[Change]]: ...

    @abstractmethod
    def project_heads(self, id: ProjectId) -> Optional[List[Head]]: ...

    @abstractmethod
    def project_metadata(self, id: ProjectId) -> Optional[Dict[str, Any]]:
        """Hosting-platform metadata (stars, forks, language...) as a dict."""
