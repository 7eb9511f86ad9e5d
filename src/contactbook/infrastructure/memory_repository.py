"""In-memory implementation of ContactRepository (no DB)."""

import threading
from dataclasses import replace

from contactbook.application.errors import ErrorKind, StoreError
from contactbook.application.query import ContactFilter
from contactbook.domain import Contact, is_valid_contact_id


def _check_id(contact_id: str) -> None:
    if not is_valid_contact_id(contact_id):
        raise StoreError(ErrorKind.MALFORMED_IDENTIFIER, f"Malformed contact id: {contact_id!r}")


def _matches(contact: Contact, contact_filter: ContactFilter) -> bool:
    if not contact.is_active:
        return False
    if contact_filter.tag is not None and contact_filter.tag not in contact.tags:
        return False
    if contact_filter.search is not None:
        needle = contact_filter.search.lower()
        values = (getattr(contact, name) or "" for name in contact_filter.search_fields)
        if not any(needle in value.lower() for value in values):
            return False
    return True


class InMemoryContactRepository:
    """Stores contacts in memory. Order preserved by insertion.
    Keeps the store-level rule that no two active contacts share an email.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, Contact] = {}
        self._lock = threading.Lock()

    def _email_taken(self, email: str, exclude_id: str | None) -> bool:
        return any(
            c.is_active and c.email == email and c.id != exclude_id
            for c in self._by_id.values()
        )

    def add(self, contact: Contact) -> Contact:
        with self._lock:
            if self._email_taken(contact.email, exclude_id=None):
                raise StoreError(ErrorKind.DUPLICATE_EMAIL, f"Email already in use: {contact.email}")
            self._by_id[contact.id] = contact
        return contact

    def _snapshot(self) -> list[Contact]:
        with self._lock:
            return list(self._by_id.values())

    def get_by_id(self, contact_id: str, *, include_inactive: bool = False) -> Contact | None:
        _check_id(contact_id)
        with self._lock:
            contact = self._by_id.get(contact_id)
        if contact is None or (not contact.is_active and not include_inactive):
            return None
        return contact

    def find_active_by_email(
        self, email: str, *, exclude_id: str | None = None
    ) -> Contact | None:
        for contact in self._snapshot():
            if contact.is_active and contact.email == email and contact.id != exclude_id:
                return contact
        return None

    def update(self, contact: Contact) -> Contact | None:
        _check_id(contact.id)
        with self._lock:
            current = self._by_id.get(contact.id)
            if current is None or not current.is_active:
                return None
            if self._email_taken(contact.email, exclude_id=contact.id):
                raise StoreError(ErrorKind.DUPLICATE_EMAIL, f"Email already in use: {contact.email}")
            stored = replace(contact, created_at=current.created_at, is_active=True)
            self._by_id[contact.id] = stored
        return stored

    def soft_delete(self, contact_id: str) -> bool:
        _check_id(contact_id)
        with self._lock:
            current = self._by_id.get(contact_id)
            if current is None or not current.is_active:
                return False
            self._by_id[contact_id] = current.deactivated()
        return True

    def find(self, contact_filter: ContactFilter) -> list[Contact]:
        matched = [c for c in self._snapshot() if _matches(c, contact_filter)]
        sort = contact_filter.sort
        matched.sort(key=lambda c: getattr(c, sort.attribute), reverse=sort.descending)
        start = contact_filter.skip
        if contact_filter.limit is None:
            return matched[start:]
        return matched[start:start + contact_filter.limit]

    def count(self, contact_filter: ContactFilter) -> int:
        return sum(1 for c in self._snapshot() if _matches(c, contact_filter))
