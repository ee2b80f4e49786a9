"""Base exception for histquery."""

from typing import Any, Dict, Optional


class HistQueryError(Exception):
    """Base exception for all histquery errors.

    `details` values are stored as strings, so paths and attribute reprs can be
    passed as-is. `hint` is a one-line remedy the CLI prints under the error.
    """

    hint: Optional[str] = None

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, str] = {k: str(v) for k, v in (details or {}).items() if v is not None}
        if hint is not None:
            self.hint = hint

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message
