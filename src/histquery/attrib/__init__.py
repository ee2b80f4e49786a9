"""Attributes, statistics, filters and samplers used by query stages.

Per-entity attributes live in the `project`, `commit`, `user` and `path`
modules; generic adapters, filters and samplers are re-exported here.
"""

from . import commit, path, project, user
from .capabilities import (
    Attribute,
    CollectionGetter,
    Countable,
    Direction,
    Filter,
    Getter,
    Group,
    OptionGetter,
    Sampler,
    Select as Selectable,
    Sort,
)
from .compose import From, FromEach, FromEachIf, Select
from .filters import (
    AllIn,
    And,
    AnyIn,
    AtLeast,
    AtMost,
    Contains,
    Equal,
    Exists,
    LessThan,
    Matches,
    Member,
    Missing,
    MoreThan,
    Not,
    Or,
    Same,
    Within,
)
from .samplers import (
    Custom,
    Distinct,
    MinRatio,
    Random,
    SimilarityCriterion,
    StrataClassifier,
    Stratified,
    Threshold,
    Thresholds,
    Top,
)
from .stats import Count, Length, Max, Mean, Median, Min, MinMax, Ratio

__all__ = [
    "commit",
    "path",
    "project",
    "user",
    "Attribute",
    "CollectionGetter",
    "Countable",
    "Direction",
    "Filter",
    "Getter",
    "Group",
    "OptionGetter",
    "Sampler",
    "Selectable",
    "Sort",
    "From",
    "FromEach",
    "FromEachIf",
    "Select",
    "AllIn",
    "And",
    "AnyIn",
    "AtLeast",
    "AtMost",
    "Contains",
    "Equal",
    "Exists",
    "LessThan",
    "Matches",
    "Member",
    "Missing",
    "MoreThan",
    "Not",
    "Or",
    "Same",
    "Within",
    "Custom",
    "Distinct",
    "MinRatio",
    "Random",
    "SimilarityCriterion",
    "StrataClassifier",
    "Stratified",
    "Threshold",
    "Thresholds",
    "Top",
    "Count",
    "Length",
    "Max",
    "Mean",
    "Median",
    "Min",
    "MinMax",
    "Ratio",
]
