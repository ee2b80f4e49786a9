"""Lazy query pipeline over entities wrapped in `ItemWithData`.

A `Stream` is a flat sequence of entities, a `GroupedStream` a sequence of
``(key, members)`` pairs. Every combinator returns a new stage; nothing is
evaluated until the final stage is iterated. `map_into` ends the pipeline
with a `Projection` of plain values.

Usage:
    (db.projects()
        .group_by(project.Language())
        .sort_by(project.Stars())
        .sample(Top(10))
        .ungroup()
        .map_into(Select(project.Id(), project.URL())))
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Optional, Tuple

from ..attrib.capabilities import Direction, Filter, Group, Sampler, Select, Sort
from ..exceptions import CacheError, QueryError, SourceUnavailableError
from ..logging_config import get_logger

logger = get_logger(__name__)

_EVALUATION_ERRORS = (TypeError, ValueError, KeyError, IndexError, AttributeError, ArithmeticError)


def _descriptor(data: Any) -> Optional[str]:
    return getattr(data, "descriptor", None)


def _require(data: Any, stage: str, attribute: Any, capability: type) -> None:
    if not isinstance(attribute, capability):
        raise QueryError(
            stage,
            attribute,
            f"{type(attribute).__name__} does not implement {capability.__name__}",
            dataset=_descriptor(data),
        )


@contextmanager
def _evaluating(data: Any, stage: str, attribute: Any) -> Iterator[None]:
    """Re-raise failures of an attribute evaluation as QueryError."""
    try:
        yield
    except (QueryError, SourceUnavailableError):
        raise
    except CacheError as e:
        raise QueryError(
            stage, attribute, str(e), dataset=_descriptor(data), cache_path=e.path
        ) from e
    except _EVALUATION_ERRORS as e:
        raise QueryError(
            stage, attribute, f"{type(e).__name__}: {e}", dataset=_descriptor(data)
        ) from e


class Projection:
    """Terminal stage holding plain values produced by `map_into`."""

    def __init__(self, data: Any, values: Iterable[Any]):
        self.data = data
        self._values = values

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def to_list(self) -> List[Any]:
        return list(self)


class Stream:
    """Flat stream of `ItemWithData`."""

    def __init__(self, data: Any, items: Iterable[Any]):
        self.data = data
        self._items = items

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def to_list(self) -> List[Any]:
        return list(self)

    def filter_by(self, attribute: Filter) -> "Stream":
        _require(self.data, "filter_by", attribute, Filter)

        def pull():
            for item in self._items:
                with _evaluating(self.data, "filter_by", attribute):
                    keep = attribute.accept(item)
                if keep:
                    yield item

        return Stream(self.data, pull())

    def map_into(self, attribute: Select) -> Projection:
        _require(self.data, "map_into", attribute, Select)

        def pull():
            for item in self._items:
                with _evaluating(self.data, "map_into", attribute):
                    value = attribute.select(item)
                yield value

        return Projection(self.data, pull())

    def sort_by(self, attribute: Sort, direction: Direction = Direction.DESCENDING) -> "Stream":
        _require(self.data, "sort_by", attribute, Sort)

        def pull():
            items = list(self._items)
            with _evaluating(self.data, "sort_by", attribute):
                attribute.sort(direction, items)
            yield from items

        return Stream(self.data, pull())

    def sort_with_direction(self, direction: Direction, attribute: Sort) -> "Stream":
        return self.sort_by(attribute, direction)

    def sample(self, sampler: Sampler) -> "Stream":
        _require(self.data, "sample", sampler, Sampler)

        def pull():
            with _evaluating(self.data, "sample", sampler):
                chosen = sampler.sample(self._items)
            yield from chosen

        return Stream(self.data, pull())

    def group_by(self, attribute: Group) -> "GroupedStream":
        _require(self.data, "group_by", attribute, Group)

        def pull():
            groups: Dict[Hashable, List[Any]] = {}
            for item in self._items:
                with _evaluating(self.data, "group_by", attribute):
                    key = attribute.select_key(item)
                    groups.setdefault(key, []).append(item)
            yield from groups.items()

        return GroupedStream(self.data, pull())

    def drop_data(self) -> Projection:
        """The bare entities, without their database handle."""
        return Projection(self.data, (item.item for item in self._items))


class GroupedStream:
    """Stream of ``(key, members)`` pairs produced by `Stream.group_by`."""

    def __init__(self, data: Any, groups: Iterable[Tuple[Hashable, List[Any]]]):
        self.data = data
        self._groups = groups

    def __iter__(self) -> Iterator[Tuple[Hashable, List[Any]]]:
        return iter(self._groups)

    def to_list(self) -> List[Tuple[Hashable, List[Any]]]:
        return list(self)

    def filter_by(self, attribute: Filter) -> "GroupedStream":
        """Filter each group's members; emptied groups are kept."""
        _require(self.data, "filter_by", attribute, Filter)

        def pull():
            for key, members in self._groups:
                with _evaluating(self.data, "filter_by", attribute):
                    kept = [item for item in members if attribute.accept(item)]
                yield key, kept

        return GroupedStream(self.data, pull())

    def map_into(self, attribute: Select) -> Projection:
        _require(self.data, "map_into", attribute, Select)

        def pull():
            for key, members in self._groups:
                with _evaluating(self.data, "map_into", attribute):
                    values = [attribute.select(item) for item in members]
                yield key, values

        return Projection(self.data, pull())

    def sort_by(self, attribute: Sort, direction: Direction = Direction.DESCENDING) -> "GroupedStream":
        """Sort the members of each group."""
        _require(self.data, "sort_by", attribute, Sort)

        def pull():
            for key, members in self._groups:
                members = list(members)
                with _evaluating(self.data, "sort_by", attribute):
                    attribute.sort(direction, members)
                yield key, members

        return GroupedStream(self.data, pull())

    def sort_with_direction(self, direction: Direction, attribute: Sort) -> "GroupedStream":
        return self.sort_by(attribute, direction)

    def sample(self, sampler: Sampler) -> "GroupedStream":
        """Sample each group independently."""
        _require(self.data, "sample", sampler, Sampler)

        def pull():
            for key, members in self._groups:
                with _evaluating(self.data, "sample", sampler):
                    chosen = sampler.sample(iter(members))
                yield key, chosen

        return GroupedStream(self.data, pull())

    def ungroup(self) -> Stream:
        """Concatenate the members of every group, in emission order."""

        def pull():
            for _, members in self._groups:
                yield from members

        return Stream(self.data, pull())

    def drop_key(self) -> Projection:
        return Projection(self.data, (members for _, members in self._groups))
