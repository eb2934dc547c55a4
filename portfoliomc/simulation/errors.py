"""Exceptions raised by the simulation engine."""

from __future__ import annotations


class InvalidConfigurationError(ValueError):
    """Raised when an engine is constructed with unusable parameters."""


class InvalidInputError(ValueError):
    """Raised when a simulation batch is requested with invalid arguments."""


class OutputFileError(OSError):
    """Raised when a file-backed output sink cannot be opened for writing."""
