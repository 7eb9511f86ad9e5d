"""
Contact Book core: clean-architecture layout.

- domain: entities (Contact, Address) and validation. No outer dependencies.
- application: use cases (ContactService), ports (ContactRepository), query building, results.
- infrastructure: adapters (InMemoryContactRepository, Neo4jContactRepository).
"""

from contactbook.application import (
    ContactDeleted,
    ContactPage,
    ContactRepository,
    ContactService,
    ErrorKind,
    Failure,
    StoreError,
)
from contactbook.domain import Address, Contact, ContactFields, FieldErrors, normalize_contact
from contactbook.infrastructure import InMemoryContactRepository, Neo4jContactRepository

__all__ = [
    "Address",
    "Contact",
    "ContactDeleted",
    "ContactFields",
    "ContactPage",
    "ContactRepository",
    "ContactService",
    "ErrorKind",
    "Failure",
    "FieldErrors",
    "InMemoryContactRepository",
    "Neo4jContactRepository",
    "StoreError",
    "normalize_contact",
]
