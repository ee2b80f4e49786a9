"""Attributes of file paths."""

from typing import List

from ..objects import ItemWithData, Path
from .capabilities import Direction, Value, sort_items


class Itself(Value):
    object_kind = Path

    def get(self, item: ItemWithData) -> Path:
        return item.item

    def sort(self, direction: Direction, items: List[ItemWithData]) -> None:
        sort_items(items, direction, lambda i: i.item.id)


class Id(Value):
    object_kind = Path

    def get(self, item: ItemWithData):
        return item.item.id


class Location(Value):
    object_kind = Path

    def get(self, item: ItemWithData) -> str:
        return item.item.location


class Language(Value):
    """Language guessed from the file extension."""

    object_kind = Path

    def get(self, item: ItemWithData):
        return item.item.language
