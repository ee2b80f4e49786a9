"""Samplers: choose a subset of a stream.

Usage:
    db.projects().sort_by(project.Stars()).sample(Top(50))
    db.projects().sample(Random(100, seed=42))
    db.projects().sample(Distinct(Top(10), MinRatio(project.Commits(), 0.9)))
    db.projects().sample(Stratified(
        project.Stars(),
        {"popular": Random(10), "obscure": Random(10)},
        Threshold(1000, "obscure", "popular"),
    ))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from itertools import islice
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..logging_config import get_logger
from ..objects import ItemWithData
from .capabilities import (
    Attribute,
    Getter,
    Group,
    OptionGetter,
    Sampler,
    read_optional,
    require_capability,
)

logger = get_logger(__name__)

MISSING_STRATUM = "NA"


class Top(Sampler):
    """The first `n` elements, in stream order."""

    def __init__(self, n: int):
        if n < 0:
            raise ValueError("Top needs a non-negative size")
        self.n = n

    def sample(self, items: Iterable[Any]) -> List[Any]:
        return list(islice(items, self.n))


class Random(Sampler):
    """`n` elements chosen uniformly without replacement.

    Deterministic for a given seed; the chosen elements keep their relative
    stream order.
    """

    def __init__(self, n: int, seed: int = 42):
        if n < 0:
            raise ValueError("Random needs a non-negative size")
        self.n = n
        self.seed = seed

    def sample(self, items: Iterable[Any]) -> List[Any]:
        population = list(items)
        if self.n >= len(population):
            return population
        rng = np.random.default_rng(self.seed)
        chosen = np.sort(rng.choice(len(population), size=self.n, replace=False))
        return [population[i] for i in chosen]


# Similarity criteria for Distinct


class SimilarityCriterion(ABC):
    """Maps an element to a value whose equality means 'too similar to keep both'."""

    @abstractmethod
    def similarity(self, item: ItemWithData) -> Hashable: ...


class _Overlap:
    """Set of values equal to another set when they overlap by more than a ratio."""

    __slots__ = ("members", "min_ratio")

    def __init__(self, members: Optional[frozenset], min_ratio: float):
        self.members = members
        self.min_ratio = min_ratio

    def __hash__(self) -> int:
        # Every pair has to be compared explicitly.
        return 42

    def __eq__(self, other: object) -> bool:
        # `self` is the element already kept, `other` the candidate; the
        # overlap is measured against the candidate.
        if not isinstance(other, _Overlap):
            return NotImplemented
        if self.members is None or other.members is None:
            return self.members is None and other.members is None
        if not other.members:
            return False
        shared = len(other.members & self.members)
        return shared / len(other.members) > self.min_ratio


class MinRatio(SimilarityCriterion):
    """Elements are similar when their collection-valued attribute overlaps by more than `ratio`."""

    def __init__(self, attribute: Attribute, ratio: float):
        require_capability(attribute, (Getter, OptionGetter), "MinRatio")
        self.attribute = attribute
        self.ratio = ratio

    def similarity(self, item: ItemWithData) -> Hashable:
        values = read_optional(self.attribute, item)
        members = None if values is None else frozenset(values)
        return _Overlap(members, self.ratio)

    def __repr__(self) -> str:
        return f"MinRatio({self.attribute!r}, {self.ratio!r})"


class _ByKey(SimilarityCriterion):
    def __init__(self, attribute: Group):
        self.attribute = attribute

    def similarity(self, item: ItemWithData) -> Hashable:
        return self.attribute.select_key(item)

    def __repr__(self) -> str:
        return repr(self.attribute)


class Distinct(Sampler):
    """Drop elements similar to an earlier one, then apply `sampler`.

    `criterion` is a SimilarityCriterion, or a Group attribute whose keys are
    compared for equality.
    """

    def __init__(self, sampler: Sampler, criterion: Any):
        if isinstance(criterion, SimilarityCriterion):
            self.criterion = criterion
        else:
            require_capability(criterion, Group, "Distinct")
            self.criterion = _ByKey(criterion)
        self.sampler = sampler

    def sample(self, items: Iterable[Any]) -> List[Any]:
        return self.sampler.sample(self._unique(items))

    def _unique(self, items: Iterable[Any]) -> Iterable[Any]:
        seen = set()
        overlaps: List[_Overlap] = []
        for item in items:
            similarity = self.criterion.similarity(item)
            if isinstance(similarity, _Overlap):
                if any(kept == similarity for kept in overlaps):
                    continue
                overlaps.append(similarity)
            else:
                if similarity in seen:
                    continue
                seen.add(similarity)
            yield item


# Strata classifiers for Stratified


class StrataClassifier(ABC):
    @abstractmethod
    def classify(self, value: Optional[Any]) -> str: ...


class Threshold(StrataClassifier):
    """Two strata split at `threshold`.

    Values up to the threshold (below it, if not `inclusive`) go to `below`,
    the rest to `above`.
    """

    def __init__(self, threshold: Any, below: str, above: str, inclusive: bool = True):
        self.threshold = threshold
        self.below = below
        self.above = above
        self.inclusive = inclusive

    def classify(self, value: Optional[Any]) -> str:
        if value is None:
            return MISSING_STRATUM
        if value < self.threshold or (self.inclusive and value == self.threshold):
            return self.below
        return self.above


class Thresholds(StrataClassifier):
    """Ordered ``(stratum, threshold)`` pairs; the first threshold the value
    does not exceed names its stratum, otherwise `default`."""

    def __init__(self, thresholds: Sequence[Tuple[str, Any]], default: str, inclusive: bool = True):
        self.thresholds = list(thresholds)
        self.default = default
        self.inclusive = inclusive

    def classify(self, value: Optional[Any]) -> str:
        if value is None:
            return MISSING_STRATUM
        for stratum, threshold in self.thresholds:
            if value < threshold or (self.inclusive and value == threshold):
                return stratum
        return self.default


class Custom(StrataClassifier):
    """Classify with an arbitrary function of the (possibly None) value."""

    def __init__(self, function: Callable[[Optional[Any]], str]):
        self.function = function

    def classify(self, value: Optional[Any]) -> str:
        return self.function(value)


class Stratified(Sampler):
    """Split elements into strata by attribute value and sample each stratum.

    Strata are emitted in order of their first element. A stratum without a
    sampler is dropped with a warning.
    """

    def __init__(self, attribute: Attribute, samplers: Dict[str, Sampler], classifier: StrataClassifier):
        require_capability(attribute, (Getter, OptionGetter), "Stratified")
        self.attribute = attribute
        self.samplers = dict(samplers)
        self.classifier = classifier

    def sample(self, items: Iterable[Any]) -> List[Any]:
        strata: Dict[str, List[Any]] = {}
        for item in items:
            stratum = self.classifier.classify(read_optional(self.attribute, item))
            strata.setdefault(stratum, []).append(item)

        result: List[Any] = []
        for stratum, members in strata.items():
            sampler = self.samplers.get(stratum)
            if sampler is None:
                logger.warning(
                    f"No sampler for stratum '{stratum}'; "
                    f"its {len(members)} elements are left out of the sample"
                )
                continue
            result.extend(sampler.sample(members))
        return result
