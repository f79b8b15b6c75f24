"""In-memory contact collection backed by a JSON snapshot."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .backend import JsonFileBackend, SnapshotBackend
from .errors import (
    ContactNotFoundError,
    MalformedSnapshotError,
    PersistenceError,
    PersistenceWarning,
    SnapshotNotFoundError,
    StoreNotLoadedError,
)
from .models import Contact, new_contact_id
from .validators import check_fields, validate_email, validate_name, validate_phone

if TYPE_CHECKING:
    from ..logging import JSONLLogger

logger = logging.getLogger(__name__)

DEFAULT_CONTACTS_PATH = Path.home() / ".rolodex" / "contacts.json"


class StoreState(Enum):
    """Lifecycle state of a ContactStore."""

    UNLOADED = "unloaded"
    READY = "ready"


@dataclass(frozen=True)
class LoadResult:
    """Outcome of ContactStore.load().

    Attributes:
        count: Number of contacts now held by the store.
        warning: Set when the store fell back to an empty collection.
        invalid: Loaded entries whose fields fail validation.
    """

    count: int
    warning: PersistenceWarning | None = None
    invalid: int = 0

    @property
    def ok(self) -> bool:
        """True if the snapshot was read without falling back."""
        return self.warning is None


class ContactStore:
    """Authoritative collection of contacts.

    All changes go through this class so validation and id uniqueness are
    checked every time. Every successful mutation is written to the
    backend before returning.

    The store starts UNLOADED; call load() once before anything else.
    A single lock covers each read-modify-write-save sequence.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        email_required: bool = False,
        backend: SnapshotBackend | None = None,
        event_log: JSONLLogger | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            path: Destination JSON file. Defaults to DEFAULT_CONTACTS_PATH.
                Ignored when a backend is given.
            email_required: Reject empty emails when True.
            backend: Custom snapshot backend.
            event_log: Optional JSONL logger for store events.
        """
        if backend is None:
            backend = JsonFileBackend(path if path is not None else DEFAULT_CONTACTS_PATH)
        self.backend = backend
        self.email_required = email_required
        self.event_log = event_log
        self._contacts: list[Contact] = []
        self._state = StoreState.UNLOADED
        self._lock = threading.RLock()

    @property
    def state(self) -> StoreState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state is StoreState.READY

    def _require_ready(self) -> None:
        if self._state is not StoreState.READY:
            raise StoreNotLoadedError()

    def _emit(self, method: str, *args: Any, **kwargs: Any) -> None:
        """Forward an event to the event log, if one is attached."""
        if self.event_log is None:
            return
        try:
            getattr(self.event_log, method)(*args, **kwargs)
        except OSError as e:
            logger.warning("Could not write event log: %s", e)

    def _index_of(self, contact_id: str) -> int | None:
        for index, contact in enumerate(self._contacts):
            if contact.id == contact_id:
                return index
        return None

    # Persistence

    def load(self) -> LoadResult:
        """Replace the collection with the stored snapshot.

        A missing or malformed snapshot is not an error: the store starts
        empty and the result carries a warning. The file is left untouched.

        Returns:
            LoadResult describing what was loaded.
        """
        with self._lock:
            try:
                raw = self.backend.read()
            except (SnapshotNotFoundError, MalformedSnapshotError) as e:
                logger.warning("%s. Starting with an empty contact list.", e)
                return self._load_empty(str(e))

            contacts, invalid = self._decode(raw)
            self._contacts = contacts
            self._state = StoreState.READY

            logger.debug("Loaded %d contact(s) from %s", len(contacts), self.backend.location)
            self._emit("log_load", self.backend.location, len(contacts))
            return LoadResult(count=len(contacts), invalid=invalid)

    def _load_empty(self, reason: str) -> LoadResult:
        self._contacts = []
        self._state = StoreState.READY
        self._emit("log_load", self.backend.location, 0, warning=reason)
        return LoadResult(count=0, warning=PersistenceWarning(reason))

    def _decode(self, raw: list[dict[str, Any]]) -> tuple[list[Contact], int]:
        """Decode snapshot entries, re-keying missing or duplicate ids."""
        contacts: list[Contact] = []
        seen: set[str] = set()
        invalid = 0

        for index, item in enumerate(raw):
            contact = Contact.from_dict(item)

            if not contact.id or contact.id in seen:
                fresh_id = new_contact_id()
                logger.warning(
                    "Entry %d has a missing or duplicate id %r, assigned %s",
                    index, contact.id, fresh_id,
                )
                contact = contact.replace(id=fresh_id)
            seen.add(contact.id)

            if not self._is_valid(contact):
                invalid += 1
                logger.warning("Entry %d (id %s) has invalid fields", index, contact.id)

            contacts.append(contact)

        return contacts, invalid

    def _is_valid(self, contact: Contact) -> bool:
        return (
            validate_name(contact.name)
            and validate_phone(contact.phone)
            and validate_email(contact.email, required=self.email_required)
        )

    def save(self) -> None:
        """Write the current collection to the backend.

        Raises:
            PersistenceError: If the write failed. Nothing is rolled back.
            StoreNotLoadedError: If load() was never called.
        """
        with self._lock:
            self._require_ready()
            self._flush()

    def _flush(self, contact: Contact | None = None) -> None:
        records = [c.to_dict() for c in self._contacts]
        try:
            self.backend.write(records)
        except OSError as e:
            reason = f"Could not save contacts to {self.backend.location}: {e}"
            logger.error(reason)
            self._emit("log_save", self.backend.location, len(records), error=str(e))
            raise PersistenceError(reason, contact=contact) from e
        self._emit("log_save", self.backend.location, len(records))

    # CRUD

    def add(self, name: str, phone: str, email: str = "") -> Contact:
        """Validate and store a new contact.

        Returns:
            The created contact.

        Raises:
            ValidationError: If a field is invalid. Nothing is stored.
            PersistenceError: If saving failed. The contact stays in memory
                and is available as ``error.contact``.
        """
        with self._lock:
            self._require_ready()
            check_fields(name, phone, email, email_required=self.email_required)

            contact = Contact.create(name=name, phone=phone, email=email)
            self._contacts.append(contact)
            self._emit("log_mutation", "added", contact.id)
            self._flush(contact)
            return contact

    def get_by_id(self, contact_id: str) -> Contact | None:
        """Get a contact by exact id, or None if absent."""
        with self._lock:
            self._require_ready()
            index = self._index_of(contact_id)
            return None if index is None else self._contacts[index]

    def update(
        self,
        contact_id: str,
        *,
        name: str | None = None,
        phone: str | None = None,
        email: str | None = None,
    ) -> Contact:
        """Change some fields of a contact.

        A field passed as None keeps its current value. Any other value,
        including an empty string, must pass validation, and so must the
        resulting contact as a whole. Either every provided field is
        applied or none is.

        Returns:
            The updated contact.

        Raises:
            ContactNotFoundError: If no contact has this id.
            ValidationError: If a provided field, or the resulting contact,
                is invalid.
            PersistenceError: If saving failed after the change was applied.
        """
        with self._lock:
            self._require_ready()
            index = self._index_of(contact_id)
            if index is None:
                raise ContactNotFoundError(contact_id)

            check_fields(name, phone, email, email_required=self.email_required)

            changes = {
                key: value
                for key, value in (("name", name), ("phone", phone), ("email", email))
                if value is not None
            }
            updated = self._contacts[index].replace(**changes)
            # a contact loaded with invalid fields must be fixed before it can be saved
            check_fields(
                updated.name, updated.phone, updated.email,
                email_required=self.email_required,
            )
            self._contacts[index] = updated
            self._emit("log_mutation", "updated", contact_id, fields=sorted(changes))
            self._flush(updated)
            return updated

    def delete(self, contact_id: str) -> bool:
        """Remove a contact.

        Returns:
            True if a contact was removed, False if the id was not found.

        Raises:
            PersistenceError: If saving failed after the removal.
        """
        with self._lock:
            self._require_ready()
            index = self._index_of(contact_id)
            if index is None:
                return False

            removed = self._contacts.pop(index)
            self._emit("log_mutation", "deleted", contact_id)
            self._flush(removed)
            return True

    # Queries

    def search(self, term: str) -> tuple[Contact, ...]:
        """Find contacts whose name, phone or email contains term.

        Matching ignores case. An empty or blank term matches nothing;
        use list_all() to get everything.
        """
        with self._lock:
            self._require_ready()
            if not term or not term.strip():
                return ()

            needle = term.casefold()
            return tuple(
                c for c in self._contacts
                if needle in c.name.casefold()
                or needle in c.phone.casefold()
                or needle in c.email.casefold()
            )

    def list_all(self) -> tuple[Contact, ...]:
        """All contacts in insertion order."""
        with self._lock:
            self._require_ready()
            return tuple(self._contacts)

    def list_sorted_by_name(self) -> tuple[Contact, ...]:
        """All contacts ordered by name, ignoring case. Ties keep insertion order."""
        with self._lock:
            self._require_ready()
            return tuple(sorted(self._contacts, key=lambda c: c.name.casefold()))

    def __len__(self) -> int:
        with self._lock:
            self._require_ready()
            return len(self._contacts)

    def __contains__(self, contact_id: object) -> bool:
        with self._lock:
            self._require_ready()
            return any(c.id == contact_id for c in self._contacts)

    def __iter__(self) -> Iterator[Contact]:
        return iter(self.list_all())
