"""Configuration-related exceptions."""

from .base import HistQueryError


class ConfigurationError(HistQueryError):
    """Raised for an invalid configuration file, environment variable or value."""
    pass
