"""Exceptions raised by the persistence layer, timer engine and backup manager."""

from __future__ import annotations


class TechWriterError(Exception):
    """Base exception for all TechWriter errors."""


class ReferentialError(TechWriterError):
    """A write references a parent record that does not exist (or is archived)."""


class NotFoundError(TechWriterError):
    """An update, delete or timer command targets an unknown id."""

    def __init__(self, collection: str, record_id: str) -> None:
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"{collection} not found: {record_id}")


class DuplicateNameError(TechWriterError):
    """A record name collides (case-insensitively) with an existing one."""


class ValidationError(TechWriterError):
    """A backup document failed structural validation. The store is untouched."""


class PartialImportFailure(TechWriterError):
    """An import failed after the destructive phase began.

    The import runs in a single transaction, so the store is rolled back
    to its pre-import contents; ``cause`` holds the original exception.
    """

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Import failed and was rolled back: {cause}")


class StorageUnavailable(TechWriterError):
    """The underlying database cannot be opened."""


class IllegalTransitionError(TechWriterError):
    """Raised when attempting an illegal timer state transition."""

    def __init__(self, from_state: str, to_state: str) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal transition: {from_state} → {to_state}. "
            f"See LEGAL_TRANSITIONS for valid transitions."
        )


class ImmutableRecordError(TechWriterError):
    """A completed time block or weekly summary was asked to change."""
