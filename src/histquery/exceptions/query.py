"""Dataset and query-evaluation exceptions."""

from pathlib import Path
from typing import Any, Optional

from .base import HistQueryError
from .cache import CacheError


class SourceUnavailableError(HistQueryError):
    """Raised when the dataset snapshot cannot answer a request."""

    def __init__(self, descriptor: str, reason: str):
        super().__init__(
            f"Dataset unavailable: {descriptor}",
            details={"dataset": descriptor, "reason": reason},
        )
        self.descriptor = descriptor
        self.reason = reason


class QueryError(HistQueryError):
    """Raised when a pipeline stage fails.

    Carries enough context to reproduce the failure or purge a bad cache:
    the stage name, the attribute (or sampler) it was evaluating, the dataset
    descriptor and the cache file involved, if any.
    """

    def __init__(
        self,
        stage: str,
        attribute: Any,
        reason: str,
        dataset: Optional[str] = None,
        cache_path: Optional[Path] = None,
    ):
        super().__init__(
            f"Query stage '{stage}' failed on {attribute!r}",
            details={
                "stage": stage,
                "attribute": repr(attribute),
                "reason": reason,
                "dataset": dataset,
                "cache": cache_path,
            },
            hint=CacheError.hint if cache_path is not None else None,
        )
        self.stage = stage
        self.attribute = attribute
        self.reason = reason
        self.dataset = dataset
        self.cache_path = cache_path
