"""Contact use cases: list, get, create, update, soft delete, search."""

import logging
from collections.abc import Mapping
from typing import Any

from contactbook.application.dto import ContactDeleted, ContactPage
from contactbook.application.errors import ErrorKind, Failure, StoreError
from contactbook.application.ports import ContactRepository
from contactbook.application.query import (
    build_list_filter,
    build_search_filter,
)
from contactbook.domain import (
    Contact,
    FieldErrors,
    normalize_contact,
    normalize_email,
)

logger = logging.getLogger(__name__)

NOT_FOUND = "Contact not found"
INVALID_ID = "Invalid contact ID format"
DUPLICATE_ON_CREATE = "Contact with this email already exists"
DUPLICATE_ON_UPDATE = "Another contact with this email already exists"
VALIDATION_ERROR = "Validation Error"

# Keys a client may not write directly.
_READ_ONLY_KEYS = ("id", "isActive", "createdAt", "updatedAt")


def _not_found() -> Failure:
    return Failure(kind=ErrorKind.NOT_FOUND, message=NOT_FOUND)


def _invalid(errors: FieldErrors) -> Failure:
    return Failure(kind=ErrorKind.VALIDATION, message=VALIDATION_ERROR, details=errors.messages)


class ContactService:
    """Orchestrates validation, existence checks and persistence for contacts.

    Expected failures come back as Failure values. StoreError of kind
    STORE_FAILURE is not expected and propagates to the caller.
    """

    def __init__(self, repository: ContactRepository) -> None:
        self._repo = repository

    def list_contacts(
        self,
        *,
        search: str | None = None,
        tag: str | None = None,
        page: Any = None,
        limit: Any = None,
    ) -> ContactPage:
        """Active contacts, newest first, one page at a time. Bad page/limit fall back to 1/10."""
        contact_filter, paging = build_list_filter(search=search, tag=tag, page=page, limit=limit)
        total = self._repo.count(contact_filter)
        contacts = self._repo.find(contact_filter)
        return ContactPage(contacts=contacts, total=total, page=paging.page, limit=paging.limit)

    def get_contact(self, contact_id: str) -> Contact | Failure:
        try:
            contact = self._repo.get_by_id(contact_id)
        except StoreError as e:
            return self._expected_failure(e)
        if contact is None:
            return _not_found()
        return contact

    def create_contact(self, raw: Mapping[str, Any]) -> Contact | Failure:
        """Validate raw input and store a new active contact."""
        result = normalize_contact(raw)
        if isinstance(result, FieldErrors):
            logger.warning("Rejected contact: %s", "; ".join(result.messages))
            return _invalid(result)

        if self._repo.find_active_by_email(result.email) is not None:
            return Failure(kind=ErrorKind.DUPLICATE_EMAIL, message=DUPLICATE_ON_CREATE)

        try:
            contact = self._repo.add(Contact.create(result))
        except StoreError as e:
            # Lost a race with a concurrent create; the store's constraint caught it.
            if e.kind is ErrorKind.DUPLICATE_EMAIL:
                return Failure(kind=ErrorKind.DUPLICATE_EMAIL, message=DUPLICATE_ON_CREATE)
            raise
        logger.info("Created contact %s", contact.id)
        return contact

    def update_contact(self, contact_id: str, changes: Mapping[str, Any]) -> Contact | Failure:
        """Apply a partial update to an active contact and re-validate the merged record."""
        try:
            current = self._repo.get_by_id(contact_id)
        except StoreError as e:
            return self._expected_failure(e)
        if current is None:
            return _not_found()

        changes = {k: v for k, v in changes.items() if k not in _READ_ONLY_KEYS}

        new_email = normalize_email(changes.get("email"))
        if new_email and new_email != current.email:
            if self._repo.find_active_by_email(new_email, exclude_id=current.id) is not None:
                return Failure(kind=ErrorKind.DUPLICATE_EMAIL, message=DUPLICATE_ON_UPDATE)

        merged = {**current.to_fields().to_raw(), **changes}
        result = normalize_contact(merged)
        if isinstance(result, FieldErrors):
            logger.warning("Rejected update of %s: %s", contact_id, "; ".join(result.messages))
            return _invalid(result)

        try:
            updated = self._repo.update(current.with_fields(result))
        except StoreError as e:
            if e.kind is ErrorKind.DUPLICATE_EMAIL:
                return Failure(kind=ErrorKind.DUPLICATE_EMAIL, message=DUPLICATE_ON_UPDATE)
            raise
        if updated is None:
            # Soft-deleted between the lookup and the write.
            return _not_found()
        logger.info("Updated contact %s", contact_id)
        return updated

    def delete_contact(self, contact_id: str) -> ContactDeleted | Failure:
        """Soft delete: the contact disappears from every read path but stays in the store."""
        try:
            deleted = self._repo.soft_delete(contact_id)
        except StoreError as e:
            return self._expected_failure(e)
        if not deleted:
            return _not_found()
        logger.info("Soft-deleted contact %s", contact_id)
        return ContactDeleted(contact_id=contact_id)

    def search_contacts(self, term: str) -> list[Contact]:
        """Active contacts whose first/last name, email or company contain term (any case)."""
        contact_filter = build_search_filter(term)
        if contact_filter.search is None:
            return []
        return self._repo.find(contact_filter)

    @staticmethod
    def _expected_failure(error: StoreError) -> Failure:
        if error.kind is ErrorKind.MALFORMED_IDENTIFIER:
            return Failure(kind=ErrorKind.MALFORMED_IDENTIFIER, message=INVALID_ID)
        raise error
