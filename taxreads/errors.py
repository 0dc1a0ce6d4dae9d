# taxreads/errors.py
from __future__ import annotations

__all__ = ["TaxreadsError", "ConfigurationError", "FileAccessError"]


class TaxreadsError(Exception):
    """Base class for errors raised by taxreads."""


class ConfigurationError(TaxreadsError, ValueError):
    """Incompatible option combination; raised before any record is written."""


class FileAccessError(TaxreadsError, OSError):
    """A required input path could not be opened for reading."""
