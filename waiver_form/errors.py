"""Errors raised while loading or reading the form configuration."""
from __future__ import annotations

from typing import Optional, Sequence


class FormConfigError(Exception):
    """Base exception for form configuration operations."""


class FieldNotFound(FormConfigError, KeyError):
    """Raised when a field identifier is not in the form."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(identifier)

    def __str__(self) -> str:
        return f"Unknown field identifier: {self.identifier}"


class CollectionReferencesUnknownField(FormConfigError):
    """Raised at load time when a collection lists an identifier with no field."""

    def __init__(self, collection_title: str, identifier: str):
        self.collection_title = collection_title
        self.identifier = identifier
        super().__init__(
            f"Collection '{collection_title}' references unknown field '{identifier}'"
        )


class CollectionCapacityExceeded(FormConfigError):
    """Raised at load time when a collection allows more repetitions than a member field has coordinates."""

    def __init__(self, collection_title: str, identifier: str, max_count: int, coordinate_count: int):
        self.collection_title = collection_title
        self.identifier = identifier
        self.max_count = max_count
        self.coordinate_count = coordinate_count
        super().__init__(
            f"Collection '{collection_title}' allows {max_count} repetitions but "
            f"'{identifier}' only has {coordinate_count} coordinates"
        )


class DanglingDefaultReference(FormConfigError):
    """Raised when a default entry points at a field that has no value."""

    def __init__(self, identifier: str, referenced_by: Optional[str] = None):
        self.identifier = identifier
        self.referenced_by = referenced_by
        if referenced_by:
            message = f"Default of '{referenced_by}' references '{identifier}', which has no value"
        else:
            message = f"Field '{identifier}' has no value"
        super().__init__(message)


class CyclicDefaultReference(FormConfigError):
    """Raised when default entries reference each other in a loop."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = list(cycle)
        super().__init__("Cyclic default reference: " + " -> ".join(self.cycle))


class CountConstraintViolation(FormConfigError):
    """Raised when supplied values fall outside a field's or collection's count bounds."""

    def __init__(self, subject: str, count: int, min_count: Optional[int], max_count: Optional[int]):
        self.subject = subject
        self.count = count
        self.min_count = min_count
        self.max_count = max_count
        super().__init__(
            f"'{subject}' has {count} value(s); expected between "
            f"{min_count if min_count is not None else 0} and "
            f"{max_count if max_count is not None else 'unbounded'}"
        )
