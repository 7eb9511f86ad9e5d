"""Turn untrusted query parameters into a store-neutral ContactFilter.

A ContactFilter always targets active contacts only; repositories add the
is_active condition themselves and there is no way to ask for inactive ones.
"""

from dataclasses import dataclass, field
from typing import Any

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
# Largest skip or limit a store can take (signed 64-bit).
MAX_WINDOW = 2**63 - 1

LIST_SEARCH_FIELDS = ("first_name", "last_name", "email")
SEARCH_FIELDS = ("first_name", "last_name", "email", "company")


@dataclass(frozen=True)
class SortOrder:
    attribute: str
    descending: bool = False


NEWEST_FIRST = SortOrder("created_at", descending=True)
BY_FIRST_NAME = SortOrder("first_name")


@dataclass(frozen=True)
class ContactFilter:
    """
    search: case-insensitive substring matched against any of search_fields.
    tag: lower-cased tag that must be present in the contact's tags.
    skip/limit: pagination window; limit None means no window.
    """

    search: str | None = None
    search_fields: tuple[str, ...] = LIST_SEARCH_FIELDS
    tag: str | None = None
    sort: SortOrder = NEWEST_FIRST
    skip: int = 0
    limit: int | None = None
    active_only: bool = field(default=True, init=False)


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def coerce_positive_int(value: Any, default: int, maximum: int = MAX_WINDOW) -> int:
    """Parse value as a positive int no larger than maximum; anything else
    (missing, "abc", "-5", "2.5", "1e30") gives default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    return number if 0 < number <= maximum else default


def page_request(page: Any = None, limit: Any = None) -> PageRequest:
    """A page whose window would run past MAX_WINDOW falls back to the first page."""
    size = coerce_positive_int(limit, DEFAULT_LIMIT)
    number = coerce_positive_int(page, DEFAULT_PAGE)
    if number * size > MAX_WINDOW:
        number = DEFAULT_PAGE
    return PageRequest(page=number, limit=size)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def find_by_tag(tag: str) -> ContactFilter:
    """Filter for active contacts carrying tag (matched lower-cased)."""
    return ContactFilter(tag=_clean(tag.lower()) if tag else None)


def build_list_filter(
    search: str | None = None,
    tag: str | None = None,
    page: Any = None,
    limit: Any = None,
) -> tuple[ContactFilter, PageRequest]:
    """Filter + pagination for the list route, newest contacts first."""
    paging = page_request(page, limit)
    base = find_by_tag(tag) if tag else ContactFilter()
    contact_filter = ContactFilter(
        search=_clean(search),
        search_fields=LIST_SEARCH_FIELDS,
        tag=base.tag,
        sort=NEWEST_FIRST,
        skip=paging.skip,
        limit=paging.limit,
    )
    return contact_filter, paging


def build_search_filter(term: str) -> ContactFilter:
    """Unpaginated free-text filter over names, email and company, ordered by first name."""
    return ContactFilter(
        search=_clean(term),
        search_fields=SEARCH_FIELDS,
        sort=BY_FIRST_NAME,
    )
