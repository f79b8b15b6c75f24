"""Rolodex: a personal contact book stored as JSON."""

from .contacts import Contact, ContactStore, LoadResult

__version__ = "0.1.0"

__all__ = ["Contact", "ContactStore", "LoadResult", "__version__"]
