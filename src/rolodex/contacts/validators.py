"""Field validation for contacts.

The predicates are pure and never raise. ``check_fields`` turns them into
``ValidationError`` for the store.
"""

import re
from typing import Any

from .errors import ValidationError

PHONE_CHARS_RE = re.compile(r"[0-9+\-()\s]*")
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MIN_PHONE_DIGITS = 7


def validate_name(value: Any) -> bool:
    """True if the name is non-empty after trimming."""
    return isinstance(value, str) and bool(value.strip())


def validate_phone(value: Any) -> bool:
    """True if the phone uses only allowed characters and has 7+ digits.

    Allowed characters are digits, whitespace, '+', '-', '(' and ')'.
    """
    if not isinstance(value, str):
        return False
    if not PHONE_CHARS_RE.fullmatch(value):
        return False
    return sum(1 for ch in value if "0" <= ch <= "9") >= MIN_PHONE_DIGITS


def validate_email(value: Any, required: bool = False) -> bool:
    """True if the email looks like local@domain.tld.

    An empty value is accepted when the email is not required.
    """
    if not isinstance(value, str):
        return False
    if not value and not required:
        return True
    return EMAIL_RE.fullmatch(value) is not None


def check_fields(
    name: str | None = None,
    phone: str | None = None,
    email: str | None = None,
    *,
    email_required: bool = False,
) -> None:
    """Validate every provided field, raising on the first failure.

    Fields passed as None are skipped.

    Raises:
        ValidationError: With the name of the failing field.
    """
    if name is not None and not validate_name(name):
        raise ValidationError("name", "name cannot be empty")

    if phone is not None and not validate_phone(phone):
        raise ValidationError(
            "phone",
            f"phone must contain only digits, spaces, '+', '-', '(' or ')' "
            f"and at least {MIN_PHONE_DIGITS} digits",
        )

    if email is not None and not validate_email(email, required=email_required):
        if email_required and not email:
            raise ValidationError("email", "email is required")
        raise ValidationError("email", "email must look like user@example.com")
