"""Adapters that reach through one attribute to apply another.

Usage:
    From(commit.Author(), user.Experience())
    FromEach(project.Commits(), commit.MessageLength())
    FromEachIf(project.Commits(), AtLeast(commit.MessageLength(), 100))
    Select(project.Id(), project.URL(), Count(project.Commits()))
"""

from typing import Any, Hashable, List, Optional, Tuple

from ..objects import ItemWithData
from .capabilities import (
    Attribute,
    CollectionGetter,
    Countable,
    Direction,
    Filter,
    Getter,
    OptionGetter,
    Select as Selectable,
    Value,
    read_optional,
    require_capability,
    sort_items,
)


def _project(attribute: Attribute, item: ItemWithData) -> Optional[Any]:
    if isinstance(attribute, Selectable):
        return attribute.select(item)
    return read_optional(attribute, item)


class From(Value):
    """Apply `attribute` to the single entity returned by `origin`."""

    def __init__(self, origin: Attribute, attribute: Attribute):
        require_capability(origin, (Getter, OptionGetter), "From")
        require_capability(attribute, (Getter, OptionGetter), "From")
        self.origin = origin
        self.attribute = attribute

    @property
    def object_kind(self) -> type:
        return self.origin.object_kind

    def get(self, item: ItemWithData) -> Optional[Any]:
        entity = read_optional(self.origin, item)
        if entity is None:
            return None
        return read_optional(self.attribute, item.rewrap(entity))


class FromEach(Value, Countable):
    """Apply `attribute` to every member of `collection`, dropping missing results."""

    def __init__(self, collection: CollectionGetter, attribute: Attribute):
        require_capability(collection, CollectionGetter, "FromEach")
        require_capability(attribute, (Getter, OptionGetter), "FromEach")
        self.collection = collection
        self.attribute = attribute

    @property
    def object_kind(self) -> type:
        return self.collection.object_kind

    def get(self, item: ItemWithData) -> Optional[List[Any]]:
        members = self.collection.items(item)
        if members is None:
            return None
        values = (read_optional(self.attribute, member) for member in members)
        return [value for value in values if value is not None]

    def count(self, item: ItemWithData) -> Optional[int]:
        values = self.get(item)
        return None if values is None else len(values)

    def select_key(self, item: ItemWithData) -> Hashable:
        values = self.get(item)
        return None if values is None else tuple(values)


class FromEachIf(Value, CollectionGetter, Countable):
    """Members of `collection` accepted by `condition`."""

    def __init__(self, collection: CollectionGetter, condition: Filter):
        require_capability(collection, CollectionGetter, "FromEachIf")
        require_capability(condition, Filter, "FromEachIf")
        self.collection = collection
        self.condition = condition

    @property
    def object_kind(self) -> type:
        return self.collection.object_kind

    def items(self, item: ItemWithData) -> Optional[List[ItemWithData]]:
        members = self.collection.items(item)
        if members is None:
            return None
        return [member for member in members if self.condition.accept(member)]

    def get(self, item: ItemWithData) -> Optional[List[Any]]:
        members = self.items(item)
        return None if members is None else [member.item for member in members]

    def count(self, item: ItemWithData) -> Optional[int]:
        members = self.items(item)
        return None if members is None else len(members)

    def select_key(self, item: ItemWithData) -> Hashable:
        members = self.items(item)
        return None if members is None else tuple(member.item.id for member in members)

    def sort(self, direction: Direction, items: List[ItemWithData]) -> None:
        sort_items(items, direction, self.count)


class Select(Value):
    """Several attributes at once, as a tuple (one CSV row)."""

    def __init__(self, *attributes: Attribute):
        if not attributes:
            raise ValueError("Select needs at least one attribute")
        for attribute in attributes:
            require_capability(attribute, (Selectable, Getter, OptionGetter), "Select")
        self.attributes = attributes

    @property
    def object_kind(self) -> type:
        return self.attributes[0].object_kind

    def get(self, item: ItemWithData) -> Tuple[Any, ...]:
        return tuple(_project(attribute, item) for attribute in self.attributes)

    def __repr__(self) -> str:
        return f"Select({', '.join(repr(a) for a in self.attributes)})"
