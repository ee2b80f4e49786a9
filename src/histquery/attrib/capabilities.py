"""Capability interfaces implemented by attributes.

An attribute is a strategy object describing one property of one kind of
entity (`object_kind`). It carries no data: pipeline stages hand it
`ItemWithData` envelopes and it answers through whichever capabilities it
implements. Stages check for the capability they need with isinstance.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Hashable, Iterable, List, Optional

from ..objects import ItemWithData


class Direction(Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class Attribute(ABC):
    """Base of every attribute, filter and adapter."""

    object_kind: type = object

    def __repr__(self) -> str:
        args = ", ".join(repr(v) for v in vars(self).values())
        return f"{type(self).__name__}({args})"


class Getter(Attribute):
    @abstractmethod
    def get(self, item: ItemWithData) -> Any:
        """The attribute value; None when the entity has no such value."""


class OptionGetter(Attribute):
    @abstractmethod
    def get_opt(self, item: ItemWithData) -> Optional[Any]: ...


class CollectionGetter(Attribute):
    @abstractmethod
    def items(self, item: ItemWithData) -> Optional[List[ItemWithData]]:
        """Members of the collection, wrapped with the same database handle."""


class Countable(Attribute):
    @abstractmethod
    def count(self, item: ItemWithData) -> Optional[int]: ...


class Group(Attribute):
    @abstractmethod
    def select_key(self, item: ItemWithData) -> Hashable: ...


class Sort(Attribute):
    @abstractmethod
    def sort(self, direction: Direction, items: List[ItemWithData]) -> None:
        """Sort `items` in place."""


class Select(Attribute):
    @abstractmethod
    def select(self, item: ItemWithData) -> Any: ...


class Filter(Attribute):
    @abstractmethod
    def accept(self, item: ItemWithData) -> bool: ...


class Sampler(ABC):
    """Chooses a subset of a stream."""

    @abstractmethod
    def sample(self, items: Iterable[Any]) -> List[Any]: ...

    def __repr__(self) -> str:
        args = ", ".join(repr(v) for v in vars(self).values())
        return f"{type(self).__name__}({args})"


def sort_key(value: Any) -> tuple:
    """Ordering key placing missing values before every present one."""
    if value is None:
        return (0,)
    if isinstance(value, Enum):
        return (1, value.value)
    return (1, value)


def sort_items(items: List[Any], direction: Direction, key: Callable[[Any], Any]) -> None:
    """Stable ascending sort by `key`, reversed afterwards for DESCENDING."""
    items.sort(key=lambda item: sort_key(key(item)))
    if direction is Direction.DESCENDING:
        items.reverse()


class Value(Getter, OptionGetter, Group, Sort, Select):
    """An attribute whose value is read once and used for every capability.

    Subclasses implement `get`; a value that may be absent is returned as None.
    """

    def get_opt(self, item: ItemWithData) -> Optional[Any]:
        return self.get(item)

    def select_key(self, item: ItemWithData) -> Hashable:
        return self.get(item)

    def select(self, item: ItemWithData) -> Any:
        return self.get(item)

    def sort(self, direction: Direction, items: List[ItemWithData]) -> None:
        sort_items(items, direction, self.get)


class Flag(Value, Filter):
    """An optional boolean; as a filter it accepts entities where it is True."""

    def accept(self, item: ItemWithData) -> bool:
        return self.get(item) is True


class IdCollection(Value, Countable):
    """A list of ids. Sorted by size; grouped by the ids as a tuple."""

    def count(self, item: ItemWithData) -> Optional[int]:
        ids = self.get(item)
        return None if ids is None else len(ids)

    def select_key(self, item: ItemWithData) -> Hashable:
        ids = self.get(item)
        return None if ids is None else tuple(ids)

    def sort(self, direction: Direction, items: List[ItemWithData]) -> None:
        sort_items(items, direction, self.count)


class EntityCollection(IdCollection, CollectionGetter):
    """A list of entities resolved from a list of ids.

    Subclasses implement `ids` and `resolve`; `get` returns bare entities and
    `items` returns them wrapped.
    """

    @abstractmethod
    def ids(self, item: ItemWithData) -> Optional[List[Any]]: ...

    @abstractmethod
    def resolve(self, item: ItemWithData, id: Any) -> Optional[Any]: ...

    def get(self, item: ItemWithData) -> Optional[List[Any]]:
        ids = self.ids(item)
        if ids is None:
            return None
        resolved = (self.resolve(item, id) for id in ids)
        return [entity for entity in resolved if entity is not None]

    def items(self, item: ItemWithData) -> Optional[List[ItemWithData]]:
        entities = self.get(item)
        if entities is None:
            return None
        return [item.rewrap(entity) for entity in entities]

    def count(self, item: ItemWithData) -> Optional[int]:
        ids = self.ids(item)
        return None if ids is None else len(ids)

    def select_key(self, item: ItemWithData) -> Hashable:
        ids = self.ids(item)
        return None if ids is None else tuple(ids)


def require_capability(attribute: Any, capability: Any, user: str) -> None:
    """Raise TypeError unless `attribute` implements `capability`."""
    if not isinstance(attribute, capability):
        kinds = capability if isinstance(capability, tuple) else (capability,)
        names = " or ".join(kind.__name__ for kind in kinds)
        raise TypeError(f"{user} needs a {names} attribute, got {attribute!r}")


def read_optional(attribute: Attribute, item: ItemWithData) -> Optional[Any]:
    """Value of a Getter or OptionGetter, None when missing."""
    if isinstance(attribute, OptionGetter):
        return attribute.get_opt(item)
    return attribute.get(item)
