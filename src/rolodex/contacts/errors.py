"""Error types for the contact store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Contact


class ContactsError(Exception):
    """Base class for all contact store errors."""


class ValidationError(ContactsError, ValueError):
    """A field value was rejected. Nothing was changed.

    Attributes:
        field: Name of the offending field ('name', 'phone' or 'email').
        reason: Human readable explanation.
    """

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class ContactNotFoundError(ContactsError, LookupError):
    """No contact with the requested id."""

    def __init__(self, contact_id: str) -> None:
        super().__init__(f"No contact with id '{contact_id}'")
        self.contact_id = contact_id


class PersistenceError(ContactsError):
    """Writing the snapshot failed.

    The in-memory collection keeps the attempted change, so callers can
    retry with ``ContactStore.save()``.

    Attributes:
        reason: Description of the underlying failure.
        contact: The contact affected by the failed operation, if any.
    """

    def __init__(self, reason: str, contact: Contact | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.contact = contact


class StoreNotLoadedError(ContactsError, RuntimeError):
    """An operation was called before ``load()``."""

    def __init__(self) -> None:
        super().__init__("ContactStore.load() must be called first")


class SnapshotNotFoundError(ContactsError):
    """The backend has nothing stored yet."""


class MalformedSnapshotError(ContactsError):
    """The stored snapshot is not a list of contact mappings."""


@dataclass(frozen=True)
class PersistenceWarning:
    """Recoverable load problem. The store fell back to an empty collection."""

    reason: str

    def __str__(self) -> str:
        return self.reason
