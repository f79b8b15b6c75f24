"""Data models for the contact store."""

import uuid
from dataclasses import asdict, dataclass, replace
from typing import Any

CONTACT_FIELDS = ("id", "name", "phone", "email")


def new_contact_id() -> str:
    """Generate a fresh contact id (32 hex chars, 128 random bits)."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Contact:
    """A single contact.

    Instances are immutable. The store swaps in a new instance on update,
    so a Contact handed to a caller never changes under them.

    Attributes:
        id: Opaque unique token assigned by the store.
        name: Display name.
        phone: Phone number as typed (digits, spaces, '+', '-', '(', ')').
        email: Email address, or empty string if not provided.
    """

    id: str
    name: str
    phone: str
    email: str = ""

    @classmethod
    def create(cls, name: str, phone: str, email: str = "") -> "Contact":
        """Create a contact with a newly generated id."""
        return cls(id=new_contact_id(), name=name, phone=phone, email=email)

    def replace(self, **changes: Any) -> "Contact":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, str]:
        """Convert to a flat mapping for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contact":
        """Create from a mapping, tolerating missing or wrong-typed fields.

        Any field that is missing or not a string becomes an empty string.
        Unknown keys are ignored.
        """
        values = {}
        for key in CONTACT_FIELDS:
            value = data.get(key, "")
            values[key] = value if isinstance(value, str) else ""
        return cls(**values)
