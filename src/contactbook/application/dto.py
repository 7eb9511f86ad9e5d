"""Result types returned by ContactService."""

import math
from dataclasses import dataclass

from contactbook.domain import Contact


@dataclass(frozen=True)
class ContactPage:
    """One page of the contact list plus the totals needed to render pagination."""

    contacts: list[Contact]
    total: int
    page: int
    limit: int

    @property
    def count(self) -> int:
        return len(self.contacts)

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit)


@dataclass(frozen=True)
class ContactDeleted:
    contact_id: str
