"""Attributes of users (commit authors and committers)."""

from typing import List, Optional

from ..objects import ItemWithData, User
from .capabilities import Direction, EntityCollection, IdCollection, Value, sort_items


class Itself(Value):
    object_kind = User

    def get(self, item: ItemWithData) -> User:
        return item.item

    def sort(self, direction: Direction, items: List[ItemWithData]) -> None:
        sort_items(items, direction, lambda i: i.item.id)


class Id(Value):
    object_kind = User

    def get(self, item: ItemWithData):
        return item.item.id


class Email(Value):
    object_kind = User

    def get(self, item: ItemWithData) -> str:
        return item.item.email


class AuthoredCommitIds(IdCollection):
    object_kind = User

    def get(self, item: ItemWithData):
        return item.data.user_authored_commit_ids(item.item.id)


class AuthoredCommits(EntityCollection):
    object_kind = User

    def ids(self, item: ItemWithData):
        return item.data.user_authored_commit_ids(item.item.id)

    def resolve(self, item: ItemWithData, id):
        return item.data.commit(id)


class CommittedCommitIds(IdCollection):
    object_kind = User

    def get(self, item: ItemWithData):
        return item.data.user_committed_commit_ids(item.item.id)


class CommittedCommits(EntityCollection):
    object_kind = User

    def ids(self, item: ItemWithData):
        return item.data.user_committed_commit_ids(item.item.id)

    def resolve(self, item: ItemWithData, id):
        return item.data.commit(id)


class AuthorExperience(Value):
    """Seconds between the user's first and last authored commit."""

    object_kind = User

    def get(self, item: ItemWithData) -> Optional[int]:
        return item.data.user_author_experience(item.item.id)


class CommitterExperience(Value):
    object_kind = User

    def get(self, item: ItemWithData) -> Optional[int]:
        return item.data.user_committer_experience(item.item.id)


class Experience(Value):
    """Seconds spanned by all of the user's authoring and committing."""

    object_kind = User

    def get(self, item: ItemWithData) -> Optional[int]:
        return item.data.user_experience(item.item.id)
