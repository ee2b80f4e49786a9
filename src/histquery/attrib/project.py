"""Attributes of projects.

Usage:
    from histquery.attrib import project
    db.projects().filter_by(AtLeast(project.Stars(), 100)).sort_by(project.Forks())
"""

from typing import Any, Callable, List, Optional

from ..objects import ItemWithData, Language as LanguageKind, Project
from .capabilities import Direction, EntityCollection, Flag, IdCollection, Value, sort_items


class Itself(Value):
    object_kind = Project

    def get(self, item: ItemWithData) -> Project:
        return item.item

    def sort(self, direction: Direction, items: List[ItemWithData]) -> None:
        sort_items(items, direction, lambda i: i.item.id)


class Id(Value):
    object_kind = Project

    def get(self, item: ItemWithData):
        return item.item.id


class URL(Value):
    object_kind = Project

    def get(self, item: ItemWithData) -> str:
        return item.item.url


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


class Metadata(Value):
    """A field of the project's hosting-platform metadata.

    `Metadata("topics")` reads any key as stored in the snapshot; pass
    `convert` to coerce the raw value. The named subclasses below fix the
    key and conversion for the common fields.
    """

    object_kind = Project
    key = ""
    convert = staticmethod(lambda value: value)

    def __init__(self, key: Optional[str] = None, convert: Optional[Callable[[Any], Any]] = None):
        if key is not None:
            self.key = key
        if convert is not None:
            self.convert = convert
        if not self.key:
            raise ValueError("Metadata needs a key")

    def get(self, item: ItemWithData) -> Optional[Any]:
        value = item.data.project_metadata(item.item.id, self.key)
        if value is None:
            return None
        return self.convert(value)


class Stars(Metadata):
    key = "stars"
    convert = staticmethod(int)


class Watchers(Metadata):
    key = "watchers"
    convert = staticmethod(int)


class Forks(Metadata):
    key = "forks"
    convert = staticmethod(int)


class Issues(Metadata):
    key = "issues"
    convert = staticmethod(int)


class BuggyIssues(Metadata):
    key = "buggy_issues"
    convert = staticmethod(int)


class OpenIssues(Metadata):
    key = "open_issues"
    convert = staticmethod(int)


class Size(Metadata):
    key = "size"
    convert = staticmethod(int)


class Created(Metadata):
    """Creation time as a Unix timestamp."""

    key = "created"
    convert = staticmethod(int)


class Language(Metadata):
    key = "language"
    convert = staticmethod(LanguageKind.from_str)


class License(Metadata):
    key = "license"
    convert = staticmethod(str)


class Description(Metadata):
    key = "description"
    convert = staticmethod(str)


class Homepage(Metadata):
    key = "homepage"
    convert = staticmethod(str)


class IsFork(Metadata, Flag):
    key = "is_fork"
    convert = staticmethod(_to_bool)


class IsArchived(Metadata, Flag):
    key = "is_archived"
    convert = staticmethod(_to_bool)


class IsDisabled(Metadata, Flag):
    key = "is_disabled"
    convert = staticmethod(_to_bool)


class HasIssues(Metadata, Flag):
    key = "has_issues"
    convert = staticmethod(_to_bool)


class HasDownloads(Metadata, Flag):
    key = "has_downloads"
    convert = staticmethod(_to_bool)


class HasWiki(Metadata, Flag):
    key = "has_wiki"
    convert = staticmethod(_to_bool)


class HasPages(Metadata, Flag):
    key = "has_pages"
    convert = staticmethod(_to_bool)


class Subscribers(Metadata):
    key = "subscribers"
    convert = staticmethod(int)


class Updated(Metadata):
    """Last update time as a Unix timestamp."""

    key = "updated"
    convert = staticmethod(int)


class Pushed(Metadata):
    key = "pushed"
    convert = staticmethod(int)


class DefaultBranch(Metadata):
    key = "default_branch"
    convert = staticmethod(str)


class Heads(IdCollection):
    object_kind = Project

    def get(self, item: ItemWithData):
        return item.data.project_heads(item.item.id)


class CommitIds(IdCollection):
    object_kind = Project

    def get(self, item: ItemWithData):
        return item.data.project_commit_ids(item.item.id)


class Commits(EntityCollection):
    object_kind = Project

    def ids(self, item: ItemWithData):
        return item.data.project_commit_ids(item.item.id)

    def resolve(self, item: ItemWithData, id):
        return item.data.commit(id)


class AuthorIds(IdCollection):
    object_kind = Project

    def get(self, item: ItemWithData):
        return item.data.project_author_ids(item.item.id)


class Authors(EntityCollection):
    object_kind = Project

    def ids(self, item: ItemWithData):
        return item.data.project_author_ids(item.item.id)

    def resolve(self, item: ItemWithData, id):
        return item.data.user(id)


class CommitterIds(IdCollection):
    object_kind = Project

    def get(self, item: ItemWithData):
        return item.data.project_committer_ids(item.item.id)


class Committers(EntityCollection):
    object_kind = Project

    def ids(self, item: ItemWithData):
        return item.data.project_committer_ids(item.item.id)

    def resolve(self, item: ItemWithData, id):
        return item.data.user(id)


class UserIds(IdCollection):
    object_kind = Project

    def get(self, item: ItemWithData):
        return item.data.project_user_ids(item.item.id)


class Users(EntityCollection):
    object_kind = Project

    def ids(self, item: ItemWithData):
        return item.data.project_user_ids(item.item.id)

    def resolve(self, item: ItemWithData, id):
        return item.data.user(id)


class PathIds(IdCollection):
    object_kind = Project

    def get(self, item: ItemWithData):
        return item.data.project_path_ids(item.item.id)


class Paths(EntityCollection):
    object_kind = Project

    def ids(self, item: ItemWithData):
        return item.data.project_path_ids(item.item.id)

    def resolve(self, item: ItemWithData, id):
        return item.data.path(id)


class Age(Value):
    """Seconds between the earliest and the latest commit timestamp."""

    object_kind = Project

    def get(self, item: ItemWithData) -> Optional[int]:
        return item.data.project_lifetime(item.item.id)


class MaxExperience(Value):
    """Largest experience, in seconds, among the project's authors."""

    object_kind = Project

    def get(self, item: ItemWithData) -> Optional[int]:
        return item.data.project_max_experience(item.item.id)
