"""In-memory dataset snapshot, built from records or loaded from JSON.

JSON layout::

    {
      "name": "sample",
      "projects": [{"id": 1, "url": "https://github.com/a/b",
                    "heads": [{"name": "main", "commit": 3}],
                    "metadata": {"stars": 10, "language": "Rust"}}],
      "commits": [{"id": 3, "hash": "ab12...", "author": 1, "committer": 1,
                   "parents": [2], "message": "Fix parser",
                   "author_time": 1500000000, "committer_time": 1500000100,
                   "changes": [{"path": 1, "snapshot": 7}]}],
      "users": [{"id": 1, "email": "dev@example.com"}],
      "paths": [{"id": 1, "location": "src/lib.rs"}],
      "snapshots": [{"id": 7, "contents": "fn main() {}"}]
    }
"""

from __future__ import annotations

import json
from pathlib import Path as FilePath
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from ..exceptions import SourceUnavailableError
from ..logging_config import get_logger
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
from .base import DataSource

logger = get_logger(__name__)


class InMemorySource(DataSource):
    """A snapshot held entirely in dictionaries keyed by id."""

    def __init__(
        self,
        name: str,
        projects: Iterable[Project] = (),
        commits: Iterable[Commit] = (),
        users: Iterable[User] = (),
        paths: Iterable[Path] = (),
        snapshots: Iterable[Snapshot] = (),
        messages: Optional[Mapping[CommitId, str]] = None,
        author_timestamps: Optional[Mapping[CommitId, int]] = None,
        committer_timestamps: Optional[Mapping[CommitId, int]] = None,
        changes: Optional[Mapping[CommitId, List[Change]]] = None,
        heads: Optional[Mapping[ProjectId, List[Head]]] = None,
        metadata: Optional[Mapping[ProjectId, Dict[str, Any]]] = None,
    ):
        self._name = name
        self._projects = {p.id: p for p in projects}
        self._commits = {c.id: c for c in commits}
        self._users = {u.id: u for u in users}
        self._paths = {p.id: p for p in paths}
        self._snapshots = {s.id: s for s in snapshots}
        self._messages = dict(messages or {})
        self._author_timestamps = dict(author_timestamps or {})
        self._committer_timestamps = dict(committer_timestamps or {})
        self._changes = dict(changes or {})
        self._heads = dict(heads or {})
        self._metadata = dict(metadata or {})

    @classmethod
    def from_json(cls, path: str | FilePath) -> "InMemorySource":
        """Load a snapshot file.

        The descriptor combines the resolved path with the file's modification
        time and size, so an edited file is treated as a new snapshot.

        Raises:
            SourceUnavailableError: If the file is missing, unreadable or malformed
        """
        path = FilePath(path)
        try:
            stat = path.stat()
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except OSError as e:
            raise SourceUnavailableError(str(path), str(e))
        except json.JSONDecodeError as e:
            raise SourceUnavailableError(str(path), f"invalid JSON: {e}")

        descriptor = f"{path.resolve()}:{stat.st_mtime_ns}:{stat.st_size}"
        try:
            source = cls.from_dict(raw, name=descriptor)
        except (KeyError, TypeError, ValueError) as e:
            raise SourceUnavailableError(str(path), f"malformed snapshot: {e}")

        logger.debug(
            f"Loaded snapshot {path}: {source.project_count()} projects, "
            f"{source.commit_count()} commits, {source.user_count()} users"
        )
        return source

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], name: Optional[str] = None) -> "InMemorySource":
        """Build a snapshot from the JSON layout described in the module docstring."""
        projects: List[Project] = []
        heads: Dict[ProjectId, List[Head]] = {}
        metadata: Dict[ProjectId, Dict[str, Any]] = {}
        for record in raw.get("projects", []):
            project_id = ProjectId(int(record["id"]))
            projects.append(Project(project_id, record["url"]))
            heads[project_id] = [
                Head(h["name"], CommitId(int(h["commit"]))) for h in record.get("heads", [])
            ]
            if record.get("metadata") is not None:
                metadata[project_id] = dict(record["metadata"])

        commits: List[Commit] = []
        messages: Dict[CommitId, str] = {}
        author_timestamps: Dict[CommitId, int] = {}
        committer_timestamps: Dict[CommitId, int] = {}
        changes: Dict[CommitId, List[Change]] = {}
        for record in raw.get("commits", []):
            commit_id = CommitId(int(record["id"]))
            commits.append(
                Commit(
                    id=commit_id,
                    hash=record["hash"],
                    committer_id=UserId(int(record["committer"])),
                    author_id=UserId(int(record["author"])),
                    parents=tuple(CommitId(int(p)) for p in record.get("parents", [])),
                )
            )
            if record.get("message") is not None:
                messages[commit_id] = record["message"]
            if record.get("author_time") is not None:
                author_timestamps[commit_id] = int(record["author_time"])
            if record.get("committer_time") is not None:
                committer_timestamps[commit_id] = int(record["committer_time"])
            changes[commit_id] = [
                Change(
                    PathId(int(c["path"])),
                    SnapshotId(int(c["snapshot"])) if c.get("snapshot") is not None else None,
                )
                for c in record.get("changes", [])
            ]

        users = [User(UserId(int(r["id"])), r["email"]) for r in raw.get("users", [])]
        paths = [Path(PathId(int(r["id"])), r["location"]) for r in raw.get("paths", [])]
        snapshots = [
            Snapshot(SnapshotId(int(r["id"])), r.get("contents", "").encode("utf-8"))
            for r in raw.get("snapshots", [])
        ]

        return cls(
            name=name or raw.get("name", "in-memory"),
            projects=projects,
            commits=commits,
            users=users,
            paths=paths,
            snapshots=snapshots,
            messages=messages,
            author_timestamps=author_timestamps,
            committer_timestamps=committer_timestamps,
            changes=changes,
            heads=heads,
            metadata=metadata,
        )

    @property
    def descriptor(self) -> str:
        return self._name

    def project_ids(self) -> Iterator[ProjectId]:
        return iter(sorted(self._projects))

    def commit_ids(self) -> Iterator[CommitId]:
        return iter(sorted(self._commits))

    def user_ids(self) -> Iterator[UserId]:
        return iter(sorted(self._users))

    def path_ids(self) -> Iterator[PathId]:
        return iter(sorted(self._paths))

    def project_count(self) -> int:
        return len(self._projects)

    def commit_count(self) -> int:
        return len(self._commits)

    def user_count(self) -> int:
        return len(self._users)

    def path_count(self) -> int:
        return len(self._paths)

    def project(self, id: ProjectId) -> Optional[Project]:
        return self._projects.get(id)

    def commit(self, id: CommitId) -> Optional[Commit]:
        return self._commits.get(id)

    def user(self, id: UserId) -> Optional[User]:
        return self._users.get(id)

    def path(self, id: PathId) -> Optional[Path]:
        return self._paths.get(id)

    def snapshot(self, id: SnapshotId) -> Optional[Snapshot]:
        return self._snapshots.get(id)

    def commit_message(self, id: CommitId) -> Optional[str]:
        return self._messages.get(id)

    def commit_author_timestamp(self, id: CommitId) -> Optional[int]:
        return self._author_timestamps.get(id)

    def commit_committer_timestamp(self, id: CommitId) -> Optional[int]:
        return self._committer_timestamps.get(id)

    def commit_changes(self, id: CommitId) -> Optional[List[Change]]:
        if id not in self._commits:
            return None
        return list(self._changes.get(id, []))

    def project_heads(self, id: ProjectId) -> Optional[List[Head]]:
        if id not in self._projects:
            return None
        return list(self._heads.get(id, []))

    def project_metadata(self, id: ProjectId) -> Optional[Dict[str, Any]]:
        return self._metadata.get(id)
