"""Filters: predicates over entities, built from attributes and constants.

A missing value never satisfies a comparison, a string test or a membership
test. Combinators short-circuit.

Usage:
    And(AtLeast(project.Stars(), 100), Not(project.IsFork()))
    Matches(commit.Message(), r"(?i)fix(es|ed)? #\\d+")
"""

import re
from typing import Any, Collection, Optional, Pattern, Union

from ..objects import ItemWithData
from .capabilities import (
    Attribute,
    Filter,
    Getter,
    OptionGetter,
    read_optional,
    require_capability,
)


class _AttributeFilter(Filter):
    def __init__(self, attribute: Attribute):
        require_capability(attribute, (Getter, OptionGetter), type(self).__name__)
        self.attribute = attribute

    @property
    def object_kind(self) -> type:
        return self.attribute.object_kind

    def value(self, item: ItemWithData) -> Optional[Any]:
        return read_optional(self.attribute, item)


class _Comparison(_AttributeFilter):
    def __init__(self, attribute: Attribute, constant: Any):
        super().__init__(attribute)
        self.constant = constant

    def accept(self, item: ItemWithData) -> bool:
        value = self.value(item)
        if value is None:
            return False
        return self.compare(value, self.constant)

    def compare(self, value: Any, constant: Any) -> bool:
        raise NotImplementedError


class LessThan(_Comparison):
    def compare(self, value: Any, constant: Any) -> bool:
        return value < constant


class AtMost(_Comparison):
    def compare(self, value: Any, constant: Any) -> bool:
        return value <= constant


class Equal(_Comparison):
    def compare(self, value: Any, constant: Any) -> bool:
        return value == constant


class AtLeast(_Comparison):
    def compare(self, value: Any, constant: Any) -> bool:
        return value >= constant


class MoreThan(_Comparison):
    def compare(self, value: Any, constant: Any) -> bool:
        return value > constant


class _Combinator(Filter):
    def __init__(self, *filters: Filter):
        if not filters:
            raise ValueError(f"{type(self).__name__} needs at least one filter")
        for f in filters:
            require_capability(f, Filter, type(self).__name__)
        self.filters = filters

    @property
    def object_kind(self) -> type:
        return self.filters[0].object_kind


class And(_Combinator):
    def accept(self, item: ItemWithData) -> bool:
        return all(f.accept(item) for f in self.filters)


class Or(_Combinator):
    def accept(self, item: ItemWithData) -> bool:
        return any(f.accept(item) for f in self.filters)


class Not(Filter):
    def __init__(self, filter: Filter):
        require_capability(filter, Filter, "Not")
        self.filter = filter

    @property
    def object_kind(self) -> type:
        return self.filter.object_kind

    def accept(self, item: ItemWithData) -> bool:
        return not self.filter.accept(item)


class Exists(_AttributeFilter):
    def accept(self, item: ItemWithData) -> bool:
        return self.value(item) is not None


class Missing(_AttributeFilter):
    def accept(self, item: ItemWithData) -> bool:
        return self.value(item) is None


class Same(_AttributeFilter):
    """String equality."""

    def __init__(self, attribute: Attribute, text: str):
        super().__init__(attribute)
        self.text = text

    def accept(self, item: ItemWithData) -> bool:
        value = self.value(item)
        return value is not None and str(value) == self.text


class Contains(_AttributeFilter):
    """Substring test."""

    def __init__(self, attribute: Attribute, text: str):
        super().__init__(attribute)
        self.text = text

    def accept(self, item: ItemWithData) -> bool:
        value = self.value(item)
        return value is not None and self.text in str(value)


class Matches(_AttributeFilter):
    """Regular-expression search anywhere in the value."""

    def __init__(self, attribute: Attribute, pattern: Union[str, Pattern]):
        super().__init__(attribute)
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def accept(self, item: ItemWithData) -> bool:
        value = self.value(item)
        return value is not None and self.pattern.search(str(value)) is not None


class Member(_AttributeFilter):
    """The value is one of `collection`."""

    def __init__(self, attribute: Attribute, collection: Collection):
        super().__init__(attribute)
        self.collection = collection

    def accept(self, item: ItemWithData) -> bool:
        value = self.value(item)
        return value is not None and value in self.collection


class AnyIn(_AttributeFilter):
    """Some element of a collection-valued attribute is in `collection`."""

    def __init__(self, attribute: Attribute, collection: Collection):
        super().__init__(attribute)
        self.collection = collection

    def accept(self, item: ItemWithData) -> bool:
        values = self.value(item)
        return values is not None and any(v in self.collection for v in values)


class AllIn(_AttributeFilter):
    """Every element of a collection-valued attribute is in `collection`."""

    def __init__(self, attribute: Attribute, collection: Collection):
        super().__init__(attribute)
        self.collection = collection

    def accept(self, item: ItemWithData) -> bool:
        values = self.value(item)
        return values is not None and all(v in self.collection for v in values)


class Within(_AttributeFilter):
    """`constant` is an element of a collection-valued attribute."""

    def __init__(self, attribute: Attribute, constant: Any):
        super().__init__(attribute)
        self.constant = constant

    def accept(self, item: ItemWithData) -> bool:
        values = self.value(item)
        return values is not None and self.constant in values
