"""Application layer: use cases, ports, query building and result types. Depends only on domain."""

from contactbook.application.contact_service import ContactService
from contactbook.application.dto import ContactDeleted, ContactPage
from contactbook.application.errors import ErrorKind, Failure, StoreError
from contactbook.application.ports import ContactRepository
from contactbook.application.query import (
    ContactFilter,
    PageRequest,
    SortOrder,
    build_list_filter,
    build_search_filter,
    find_by_tag,
)

__all__ = [
    "ContactDeleted",
    "ContactFilter",
    "ContactPage",
    "ContactRepository",
    "ContactService",
    "ErrorKind",
    "Failure",
    "PageRequest",
    "SortOrder",
    "StoreError",
    "build_list_filter",
    "build_search_filter",
    "find_by_tag",
]
