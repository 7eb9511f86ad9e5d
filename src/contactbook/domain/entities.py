"""Domain entities: Contact and Address."""

import uuid
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone

DEFAULT_COUNTRY = "USA"


def new_contact_id() -> str:
    return str(uuid.uuid4())


def is_valid_contact_id(value: str | None) -> bool:
    """True if value is a contact identifier in canonical UUID form (8-4-4-4-12 hex, any case).
    Braced, urn:uuid: and undashed spellings are rejected."""
    if not value or not isinstance(value, str):
        return False
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        return False
    return str(parsed) == value.lower()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Address:
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str = DEFAULT_COUNTRY


@dataclass(frozen=True)
class ContactFields:
    """
    The writable, already-normalized part of a contact.
    Produced only by normalize_contact; never built from raw input directly.
    """

    first_name: str
    last_name: str
    email: str
    phone: str
    address: Address | None = None
    company: str | None = None
    job_title: str | None = None
    notes: str | None = None
    tags: tuple[str, ...] = ()

    def to_raw(self) -> dict:
        """Return the fields in request shape (camelCase), e.g. as the base of a partial update."""
        address = None
        if self.address is not None:
            address = {
                "street": self.address.street,
                "city": self.address.city,
                "state": self.address.state,
                "zipCode": self.address.zip_code,
                "country": self.address.country,
            }
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "address": address,
            "company": self.company,
            "jobTitle": self.job_title,
            "notes": self.notes,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class Contact:
    """
    A person in the directory.
    Contacts are never removed: a soft delete flips is_active to False.
    """

    id: str = field(default_factory=new_contact_id)
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: Address | None = None
    company: str | None = None
    job_title: str | None = None
    notes: str | None = None
    tags: tuple[str, ...] = ()
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def create(cls, values: ContactFields) -> "Contact":
        now = utcnow()
        return cls(created_at=now, updated_at=now, **_as_kwargs(values))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_fields(self) -> ContactFields:
        return ContactFields(**_as_kwargs(self))

    def with_fields(self, values: ContactFields) -> "Contact":
        """Return a copy carrying the given fields and a fresh updated_at."""
        return replace(self, updated_at=utcnow(), **_as_kwargs(values))

    def deactivated(self) -> "Contact":
        return replace(self, is_active=False, updated_at=utcnow())


def _as_kwargs(values) -> dict:
    return {f.name: getattr(values, f.name) for f in fields(ContactFields)}
