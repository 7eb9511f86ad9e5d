"""Validate and normalize raw contact input.

normalize_contact is pure: it takes request-shaped data (camelCase keys) and
returns either ContactFields (normalized) or FieldErrors listing every
failing field, never just the first.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from contactbook.domain.entities import DEFAULT_COUNTRY, Address, ContactFields

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_PATTERN = re.compile(r"\+?[1-9][0-9]{0,15}")


@dataclass(frozen=True)
class FieldErrors:
    """Raw input failed validation. One message per failing constraint."""

    messages: tuple[str, ...]


@dataclass(frozen=True)
class _TextRule:
    key: str
    label: str
    max_length: int | None = None
    required: bool = False
    pattern: re.Pattern | None = None
    pattern_message: str = ""


_FIRST_NAME = _TextRule("firstName", "First name", max_length=50, required=True)
_LAST_NAME = _TextRule("lastName", "Last name", max_length=50, required=True)
_EMAIL = _TextRule(
    "email",
    "Email",
    required=True,
    pattern=EMAIL_PATTERN,
    pattern_message="Please provide a valid email address",
)
_PHONE = _TextRule(
    "phone",
    "Phone number",
    required=True,
    pattern=PHONE_PATTERN,
    pattern_message="Please provide a valid phone number",
)
_COMPANY = _TextRule("company", "Company name", max_length=100)
_JOB_TITLE = _TextRule("jobTitle", "Job title", max_length=100)
_NOTES = _TextRule("notes", "Notes", max_length=500)

_ADDRESS_RULES = (
    _TextRule("street", "Street address", max_length=100),
    _TextRule("city", "City", max_length=50),
    _TextRule("state", "State", max_length=50),
    _TextRule("zipCode", "Zip code", max_length=10),
    _TextRule("country", "Country", max_length=50),
)


def capitalize_name(value: str) -> str:
    """First letter upper case, the rest lower case ("mcDONALD" -> "Mcdonald")."""
    return value[:1].upper() + value[1:].lower()


def _check_text(rule: _TextRule, raw: Any, errors: list[str]) -> str | None:
    """Trim and check one text value. Returns the trimmed text, or None when absent or invalid."""
    if raw is None:
        value = ""
    elif isinstance(raw, str):
        value = raw.strip()
    else:
        errors.append(f"{rule.label} must be text")
        return None

    if not value:
        if rule.required:
            errors.append(f"{rule.label} is required")
        return None
    if rule.max_length is not None and len(value) > rule.max_length:
        errors.append(f"{rule.label} cannot exceed {rule.max_length} characters")
        return None
    if rule.pattern is not None and not rule.pattern.fullmatch(value):
        errors.append(rule.pattern_message)
        return None
    return value


def _check_address(raw: Any, errors: list[str]) -> Address | None:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        errors.append("Address must be an object")
        return None
    street, city, state, zip_code, country = (
        _check_text(rule, raw.get(rule.key), errors) for rule in _ADDRESS_RULES
    )
    return Address(
        street=street,
        city=city,
        state=state,
        zip_code=zip_code,
        country=country or DEFAULT_COUNTRY,
    )


def _check_tags(raw: Any, errors: list[str]) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str) or not isinstance(raw, (list, tuple)):
        errors.append("Tags must be a list of text values")
        return ()
    if not all(isinstance(tag, str) for tag in raw):
        errors.append("Tags must be a list of text values")
        return ()
    # Order and duplicates are kept.
    return tuple(tag.strip().lower() for tag in raw)


def normalize_contact(raw: Mapping[str, Any]) -> ContactFields | FieldErrors:
    """Validate raw contact data and return normalized fields, or every error found.

    Normalization: all text is trimmed; first/last name are capitalized;
    email and tags are lower-cased; an address without a country gets "USA".
    """
    errors: list[str] = []

    first_name = _check_text(_FIRST_NAME, raw.get("firstName"), errors)
    last_name = _check_text(_LAST_NAME, raw.get("lastName"), errors)
    email = raw.get("email")
    if isinstance(email, str):
        email = email.lower()
    email = _check_text(_EMAIL, email, errors)
    phone = _check_text(_PHONE, raw.get("phone"), errors)
    address = _check_address(raw.get("address"), errors)
    company = _check_text(_COMPANY, raw.get("company"), errors)
    job_title = _check_text(_JOB_TITLE, raw.get("jobTitle"), errors)
    notes = _check_text(_NOTES, raw.get("notes"), errors)
    tags = _check_tags(raw.get("tags"), errors)

    if errors:
        return FieldErrors(messages=tuple(errors))

    return ContactFields(
        first_name=capitalize_name(first_name),
        last_name=capitalize_name(last_name),
        email=email,
        phone=phone,
        address=address,
        company=company,
        job_title=job_title,
        notes=notes,
        tags=tags,
    )


def normalize_email(raw: Any) -> str | None:
    """Email in stored form (trimmed, lower-cased), or None if raw is not text."""
    if not isinstance(raw, str):
        return None
    return raw.strip().lower() or None
