"""Contact records, validation and the persistent store."""

from .backend import JsonFileBackend, SnapshotBackend
from .errors import (
    ContactNotFoundError,
    ContactsError,
    MalformedSnapshotError,
    PersistenceError,
    PersistenceWarning,
    SnapshotNotFoundError,
    StoreNotLoadedError,
    ValidationError,
)
from .models import Contact, new_contact_id
from .store import DEFAULT_CONTACTS_PATH, ContactStore, LoadResult, StoreState
from .validators import check_fields, validate_email, validate_name, validate_phone

__all__ = [
    "Contact",
    "ContactNotFoundError",
    "ContactStore",
    "ContactsError",
    "DEFAULT_CONTACTS_PATH",
    "JsonFileBackend",
    "LoadResult",
    "MalformedSnapshotError",
    "PersistenceError",
    "PersistenceWarning",
    "SnapshotBackend",
    "SnapshotNotFoundError",
    "StoreNotLoadedError",
    "StoreState",
    "ValidationError",
    "check_fields",
    "new_contact_id",
    "validate_email",
    "validate_name",
    "validate_phone",
]
