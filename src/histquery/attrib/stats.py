"""Statistics over other attributes.

Each adapter is bound to the entity kind of the attribute it wraps. A
statistic over a missing or empty collection is None, never zero.

Usage:
    Median(FromEach(project.Commits(), commit.MessageLength()))
    Ratio(project.Authors(), project.Users())
"""

from typing import Any, List, Optional, Sequence

import numpy as np

from ..objects import ItemWithData
from .capabilities import (
    Attribute,
    Countable,
    Getter,
    OptionGetter,
    Value,
    read_optional,
    require_capability,
)


class _Adapter(Value):
    def __init__(self, attribute: Attribute):
        self.attribute = attribute

    @property
    def object_kind(self) -> type:
        return self.attribute.object_kind


class Count(_Adapter):
    """Size of a countable attribute."""

    def __init__(self, attribute: Countable):
        require_capability(attribute, Countable, "Count")
        super().__init__(attribute)

    def get(self, item: ItemWithData) -> Optional[int]:
        return self.attribute.count(item)


class Length(_Adapter):
    """Length of an optional string attribute."""

    def __init__(self, attribute: Attribute):
        require_capability(attribute, (Getter, OptionGetter), "Length")
        super().__init__(attribute)

    def get(self, item: ItemWithData) -> Optional[int]:
        value = read_optional(self.attribute, item)
        return None if value is None else len(value)


class _Numbers(_Adapter):
    """Base for statistics over an attribute yielding a list of numbers."""

    def __init__(self, attribute: Attribute):
        require_capability(attribute, (Getter, OptionGetter), type(self).__name__)
        super().__init__(attribute)

    def numbers(self, item: ItemWithData) -> List[Any]:
        values = read_optional(self.attribute, item)
        if values is None:
            return []
        return [v for v in values if v is not None]

    def get(self, item: ItemWithData) -> Optional[Any]:
        numbers = self.numbers(item)
        if not numbers:
            return None
        return self.compute(numbers)

    def compute(self, numbers: Sequence[Any]) -> Any:
        raise NotImplementedError


class Min(_Numbers):
    def compute(self, numbers: Sequence[Any]) -> Any:
        return min(numbers)


class Max(_Numbers):
    def compute(self, numbers: Sequence[Any]) -> Any:
        return max(numbers)


class MinMax(_Numbers):
    """The smallest and the largest value as a pair."""

    def compute(self, numbers: Sequence[Any]) -> Any:
        return (min(numbers), max(numbers))


class Mean(_Numbers):
    def compute(self, numbers: Sequence[Any]) -> float:
        return float(np.mean(numbers))


class Median(_Numbers):
    """Middle value; the mean of the two middle values for an even count."""

    def compute(self, numbers: Sequence[Any]) -> Any:
        ordered = sorted(numbers)
        middle = len(ordered) // 2
        if len(ordered) % 2 == 1:
            return ordered[middle]
        return float(np.mean(ordered[middle - 1:middle + 1]))


class Ratio(_Adapter):
    """``count(attribute) / count(population)``.

    None if either count is missing or the population is empty.
    """

    def __init__(self, attribute: Countable, population: Countable):
        require_capability(attribute, Countable, "Ratio")
        require_capability(population, Countable, "Ratio")
        super().__init__(attribute)
        self.population = population

    def get(self, item: ItemWithData) -> Optional[float]:
        part = self.attribute.count(item)
        whole = self.population.count(item)
        if part is None or whole is None or whole == 0:
            return None
        return part / whole
