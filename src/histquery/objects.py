"""Entity and identity model.

Ids are thin wrappers around the integers assigned at ingestion. Entities are
small immutable records; heavier facts (messages, timestamps, changes,
metadata) live in the database and are reached through `ItemWithData`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Generic, Optional, Tuple, TypeVar

if TYPE_CHECKING:
    from .database import Database


@dataclass(frozen=True, order=True)
class _Identity:
    value: int

    def __str__(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value})"


class ProjectId(_Identity):
    pass


class CommitId(_Identity):
    pass


class UserId(_Identity):
    pass


class PathId(_Identity):
    pass


class SnapshotId(_Identity):
    pass


class Language(Enum):
    """Programming languages recognised in metadata and file extensions."""

    C = "C"
    CPP = "C++"
    CSHARP = "C#"
    GO = "Go"
    HASKELL = "Haskell"
    JAVA = "Java"
    JAVASCRIPT = "JavaScript"
    KOTLIN = "Kotlin"
    OBJECTIVE_C = "Objective-C"
    PERL = "Perl"
    PHP = "PHP"
    PYTHON = "Python"
    RUBY = "Ruby"
    RUST = "Rust"
    SCALA = "Scala"
    SHELL = "Shell"
    SWIFT = "Swift"
    TYPESCRIPT = "TypeScript"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_str(cls, name: Optional[str]) -> Optional["Language"]:
        """Parse a language name case-insensitively; unknown names give None."""
        if not name:
            return None
        return _LANGUAGE_NAMES.get(name.strip().lower())

    @classmethod
    def from_path(cls, location: str) -> Optional["Language"]:
        """Guess the language of a file from its extension."""
        suffix = PurePosixPath(location).suffix.lower()
        return _LANGUAGE_EXTENSIONS.get(suffix)


_LANGUAGE_NAMES = {language.value.lower(): language for language in Language}
_LANGUAGE_NAMES.update({
    "cpp": Language.CPP,
    "csharp": Language.CSHARP,
    "golang": Language.GO,
    "js": Language.JAVASCRIPT,
    "objc": Language.OBJECTIVE_C,
    "py": Language.PYTHON,
    "ts": Language.TYPESCRIPT,
})

_LANGUAGE_EXTENSIONS = {
    ".c": Language.C,
    ".h": Language.C,
    ".cc": Language.CPP,
    ".cpp": Language.CPP,
    ".cxx": Language.CPP,
    ".hpp": Language.CPP,
    ".cs": Language.CSHARP,
    ".go": Language.GO,
    ".hs": Language.HASKELL,
    ".java": Language.JAVA,
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".kt": Language.KOTLIN,
    ".m": Language.OBJECTIVE_C,
    ".mm": Language.OBJECTIVE_C,
    ".pl": Language.PERL,
    ".pm": Language.PERL,
    ".php": Language.PHP,
    ".py": Language.PYTHON,
    ".rb": Language.RUBY,
    ".rs": Language.RUST,
    ".scala": Language.SCALA,
    ".sh": Language.SHELL,
    ".bash": Language.SHELL,
    ".swift": Language.SWIFT,
    ".ts": Language.TYPESCRIPT,
    ".tsx": Language.TYPESCRIPT,
}


@dataclass(frozen=True)
class Project:
    id: ProjectId
    url: str


@dataclass(frozen=True)
class Commit:
    id: CommitId
    hash: str
    committer_id: UserId
    author_id: UserId
    parents: Tuple[CommitId, ...] = ()


@dataclass(frozen=True)
class User:
    id: UserId
    email: str


@dataclass(frozen=True)
class Path:
    id: PathId
    location: str

    @property
    def language(self) -> Optional[Language]:
        return Language.from_path(self.location)


@dataclass(frozen=True)
class Snapshot:
    id: SnapshotId
    contents: bytes


@dataclass(frozen=True)
class Head:
    """A named branch tip of a project."""

    name: str
    commit_id: CommitId


@dataclass(frozen=True)
class Change:
    """A path touched by a commit and the snapshot of its new contents.

    `snapshot_id` is None when the commit deleted the path.
    """

    path_id: PathId
    snapshot_id: Optional[SnapshotId] = None


T = TypeVar("T")


@dataclass(frozen=True)
class ItemWithData(Generic[T]):
    """An entity travelling through a query together with its database.

    Equality and hashing consider only the item. The database handle is shared
    by every envelope produced in one run.
    """

    data: "Database" = field(compare=False, repr=False)
    item: T

    def rewrap(self, other: T) -> "ItemWithData":
        """Wrap another entity with the same database handle."""
        return ItemWithData(self.data, other)

    @property
    def id(self):
        return self.item.id
