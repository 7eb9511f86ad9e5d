"""Application ports (interfaces). Implemented by infrastructure adapters."""

from typing import Protocol

from contactbook.application.query import ContactFilter
from contactbook.domain import Contact


class ContactRepository(Protocol):
    """Persists and queries contacts.

    Every method taking a contact id raises StoreError(MALFORMED_IDENTIFIER)
    for an id that is not well formed. Writes that would give two active
    contacts the same email raise StoreError(DUPLICATE_EMAIL); any other
    persistence problem raises StoreError(STORE_FAILURE).
    """

    def add(self, contact: Contact) -> Contact:
        """Store a new contact and return it as stored."""
        ...

    def get_by_id(self, contact_id: str, *, include_inactive: bool = False) -> Contact | None:
        """Return the contact, or None if absent (or soft-deleted, unless include_inactive)."""
        ...

    def find_active_by_email(
        self, email: str, *, exclude_id: str | None = None
    ) -> Contact | None:
        """Return the active contact holding email (already normalized), ignoring exclude_id."""
        ...

    def update(self, contact: Contact) -> Contact | None:
        """Replace the stored fields of an active contact. None if it is missing or inactive."""
        ...

    def soft_delete(self, contact_id: str) -> bool:
        """Mark an active contact inactive. False if it is missing or already inactive."""
        ...

    def find(self, contact_filter: ContactFilter) -> list[Contact]:
        """Return active contacts matching the filter, sorted and windowed as it says."""
        ...

    def count(self, contact_filter: ContactFilter) -> int:
        """Count active contacts matching the filter, ignoring its window."""
        ...
