"""Attributes of commits."""

from typing import List, Optional

from ..objects import Commit, ItemWithData
from .capabilities import Direction, EntityCollection, IdCollection, Value, sort_items


class Itself(Value):
    object_kind = Commit

    def get(self, item: ItemWithData) -> Commit:
        return item.item

    def sort(self, direction: Direction, items: List[ItemWithData]) -> None:
        sort_items(items, direction, lambda i: i.item.id)


class Id(Value):
    object_kind = Commit

    def get(self, item: ItemWithData):
        return item.item.id


class Hash(Value):
    object_kind = Commit

    def get(self, item: ItemWithData) -> str:
        return item.item.hash


class AuthorId(Value):
    object_kind = Commit

    def get(self, item: ItemWithData):
        return item.item.author_id


class CommitterId(Value):
    object_kind = Commit

    def get(self, item: ItemWithData):
        return item.item.committer_id


class Author(Value):
    object_kind = Commit

    def get(self, item: ItemWithData):
        return item.data.user(item.item.author_id)

    def sort(self, direction: Direction, items: List[ItemWithData]) -> None:
        sort_items(items, direction, lambda i: i.item.author_id)


class Committer(Value):
    object_kind = Commit

    def get(self, item: ItemWithData):
        return item.data.user(item.item.committer_id)

    def sort(self, direction: Direction, items: List[ItemWithData]) -> None:
        sort_items(items, direction, lambda i: i.item.committer_id)


class Message(Value):
    object_kind = Commit

    def get(self, item: ItemWithData) -> Optional[str]:
        return item.data.commit_message(item.item.id)


class MessageLength(Value):
    object_kind = Commit

    def get(self, item: ItemWithData) -> Optional[int]:
        message = item.data.commit_message(item.item.id)
        return None if message is None else len(message)


class AuthoredTimestamp(Value):
    object_kind = Commit

    def get(self, item: ItemWithData) -> Optional[int]:
        return item.data.commit_author_timestamp(item.item.id)


class CommittedTimestamp(Value):
    object_kind = Commit

    def get(self, item: ItemWithData) -> Optional[int]:
        return item.data.commit_committer_timestamp(item.item.id)


class ParentIds(IdCollection):
    object_kind = Commit

    def get(self, item: ItemWithData):
        return list(item.item.parents)


class Parents(EntityCollection):
    object_kind = Commit

    def ids(self, item: ItemWithData):
        return list(item.item.parents)

    def resolve(self, item: ItemWithData, id):
        return item.data.commit(id)


class Changes(IdCollection):
    """Paths touched by the commit with the snapshots they changed to."""

    object_kind = Commit

    def get(self, item: ItemWithData):
        return item.data.commit_changes(item.item.id)


class PathIds(IdCollection):
    object_kind = Commit

    def get(self, item: ItemWithData):
        changes = item.data.commit_changes(item.item.id)
        if changes is None:
            return None
        return [change.path_id for change in changes]


class Paths(EntityCollection):
    object_kind = Commit

    def ids(self, item: ItemWithData):
        return PathIds().get(item)

    def resolve(self, item: ItemWithData, id):
        return item.data.path(id)


class HistoryDepth(Value):
    """Number of commits before this one along first parents."""

    object_kind = Commit

    def get(self, item: ItemWithData) -> Optional[int]:
        return item.data.commit_history_depth(item.item.id)


class CumulativeChangeCount(Value):
    """Changes made by this commit and its first-parent ancestors."""

    object_kind = Commit

    def get(self, item: ItemWithData) -> Optional[int]:
        return item.data.commit_cumulative_change_count(item.item.id)
