"""Domain layer: entities and validation. No dependencies on outer layers."""

from contactbook.domain.entities import (
    DEFAULT_COUNTRY,
    Address,
    Contact,
    ContactFields,
    is_valid_contact_id,
)
from contactbook.domain.validation import FieldErrors, normalize_contact, normalize_email

__all__ = [
    "Address",
    "Contact",
    "ContactFields",
    "DEFAULT_COUNTRY",
    "FieldErrors",
    "is_valid_contact_id",
    "normalize_contact",
    "normalize_email",
]
