"""Exception types raised by the placement engine."""

from __future__ import annotations


class UnsupportedFieldTypeError(ValueError):
    """Raised when a field type has no entry in the metadata default table."""


class DuplicateFormIdError(ValueError):
    """Raised when a form id is reused within one editing session."""


class FieldNotFoundError(KeyError):
    """Raised when no placed field carries the requested form id."""


class PdfLoadError(RuntimeError):
    """Raised when a PDF cannot be opened."""
