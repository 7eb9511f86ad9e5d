"""Neo4j implementation of ContactRepository.
Graph: one (:Contact) node per contact, never deleted. The nested address is
flattened to address_* properties. active_email mirrors email while the
contact is active and is removed on soft delete; a uniqueness constraint on it
(see schema.py) keeps one active contact per email.
"""

import logging
from datetime import datetime

from neo4j.exceptions import ConstraintError, DriverError, Neo4jError

from contactbook.application.errors import ErrorKind, StoreError
from contactbook.application.query import ContactFilter
from contactbook.domain import Address, Contact, is_valid_contact_id
from contactbook.domain.entities import utcnow

logger = logging.getLogger(__name__)

# Whitelist of sortable/searchable properties; filters never carry raw property names from users.
_PROPERTIES = {
    "first_name": "c.first_name",
    "last_name": "c.last_name",
    "email": "c.email",
    "company": "c.company",
    "created_at": "c.created_at",
}

_CREATE_QUERY = """
CREATE (c:Contact $props)
RETURN c
"""

_GET_QUERY = """
MATCH (c:Contact {id: $id})
WHERE $include_inactive OR c.is_active = true
RETURN c
"""

_FIND_BY_EMAIL_QUERY = """
MATCH (c:Contact {email: $email})
WHERE c.is_active = true AND ($exclude_id IS NULL OR c.id <> $exclude_id)
RETURN c
LIMIT 1
"""

_UPDATE_QUERY = """
MATCH (c:Contact {id: $id})
WHERE c.is_active = true
SET c += $props
RETURN c
"""

_SOFT_DELETE_QUERY = """
MATCH (c:Contact {id: $id})
WHERE c.is_active = true
SET c.is_active = false, c.updated_at = $updated_at
REMOVE c.active_email
RETURN c.id AS id
"""


def _datetime_to_iso(dt: datetime) -> str:
    return dt.isoformat(timespec="microseconds")


def _iso_to_datetime(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _check_id(contact_id: str) -> None:
    if not is_valid_contact_id(contact_id):
        raise StoreError(ErrorKind.MALFORMED_IDENTIFIER, f"Malformed contact id: {contact_id!r}")


def _contact_to_props(contact: Contact) -> dict:
    """Node properties for a contact. None values remove the property on SET +=."""
    address = contact.address or Address(country=None)
    return {
        "id": contact.id,
        "first_name": contact.first_name,
        "last_name": contact.last_name,
        "email": contact.email,
        "active_email": contact.email if contact.is_active else None,
        "phone": contact.phone,
        "address_street": address.street,
        "address_city": address.city,
        "address_state": address.state,
        "address_zip_code": address.zip_code,
        "address_country": address.country,
        "company": contact.company,
        "job_title": contact.job_title,
        "notes": contact.notes,
        "tags": list(contact.tags),
        "is_active": contact.is_active,
        "created_at": _datetime_to_iso(contact.created_at),
        "updated_at": _datetime_to_iso(contact.updated_at),
    }


def _node_to_contact(node) -> Contact:
    address = None
    # address_country is always set when an address exists.
    if node.get("address_country") is not None:
        address = Address(
            street=node.get("address_street"),
            city=node.get("address_city"),
            state=node.get("address_state"),
            zip_code=node.get("address_zip_code"),
            country=node["address_country"],
        )
    return Contact(
        id=node["id"],
        first_name=node["first_name"],
        last_name=node["last_name"],
        email=node["email"],
        phone=node["phone"],
        address=address,
        company=node.get("company"),
        job_title=node.get("job_title"),
        notes=node.get("notes"),
        tags=tuple(node.get("tags") or ()),
        is_active=node["is_active"],
        created_at=_iso_to_datetime(node["created_at"]),
        updated_at=_iso_to_datetime(node["updated_at"]),
    )


def _where_clause(contact_filter: ContactFilter) -> tuple[str, dict]:
    conditions = ["c.is_active = true"]
    params: dict = {}
    if contact_filter.search is not None:
        alternatives = " OR ".join(
            f"toLower(coalesce({_PROPERTIES[name]}, '')) CONTAINS $search"
            for name in contact_filter.search_fields
        )
        conditions.append(f"({alternatives})")
        params["search"] = contact_filter.search.lower()
    if contact_filter.tag is not None:
        conditions.append("$tag IN c.tags")
        params["tag"] = contact_filter.tag
    return "WHERE " + " AND ".join(conditions), params


class Neo4jContactRepository:
    """Stores contacts as :Contact nodes. The driver is owned by the caller."""

    def __init__(self, driver: object) -> None:
        self._driver = driver

    def _run(self, query: str, **params) -> list:
        """Run query in its own session and return all records, translating driver errors."""
        try:
            with self._driver.session() as session:
                return list(session.run(query, **params))
        except ConstraintError as e:
            raise StoreError(ErrorKind.DUPLICATE_EMAIL, str(e)) from e
        except (Neo4jError, DriverError) as e:
            logger.exception("Neo4j query failed")
            raise StoreError(ErrorKind.STORE_FAILURE, str(e)) from e

    def add(self, contact: Contact) -> Contact:
        records = self._run(_CREATE_QUERY, props=_contact_to_props(contact))
        return _node_to_contact(records[0]["c"])

    def get_by_id(self, contact_id: str, *, include_inactive: bool = False) -> Contact | None:
        _check_id(contact_id)
        records = self._run(_GET_QUERY, id=contact_id, include_inactive=include_inactive)
        if not records:
            return None
        return _node_to_contact(records[0]["c"])

    def find_active_by_email(
        self, email: str, *, exclude_id: str | None = None
    ) -> Contact | None:
        records = self._run(_FIND_BY_EMAIL_QUERY, email=email, exclude_id=exclude_id)
        if not records:
            return None
        return _node_to_contact(records[0]["c"])

    def update(self, contact: Contact) -> Contact | None:
        _check_id(contact.id)
        props = _contact_to_props(contact)
        # Never rewritten by an update.
        for key in ("id", "created_at", "is_active"):
            props.pop(key)
        props["active_email"] = contact.email
        records = self._run(_UPDATE_QUERY, id=contact.id, props=props)
        if not records:
            return None
        return _node_to_contact(records[0]["c"])

    def soft_delete(self, contact_id: str) -> bool:
        _check_id(contact_id)
        records = self._run(
            _SOFT_DELETE_QUERY,
            id=contact_id,
            updated_at=_datetime_to_iso(utcnow()),
        )
        return bool(records)

    def find(self, contact_filter: ContactFilter) -> list[Contact]:
        where, params = _where_clause(contact_filter)
        sort = contact_filter.sort
        query = f"MATCH (c:Contact) {where} RETURN c ORDER BY {_PROPERTIES[sort.attribute]}"
        if sort.descending:
            query += " DESC"
        if contact_filter.skip:
            query += " SKIP $skip"
            params["skip"] = contact_filter.skip
        if contact_filter.limit is not None:
            query += " LIMIT $limit"
            params["limit"] = contact_filter.limit
        return [_node_to_contact(rec["c"]) for rec in self._run(query, **params)]

    def count(self, contact_filter: ContactFilter) -> int:
        where, params = _where_clause(contact_filter)
        records = self._run(f"MATCH (c:Contact) {where} RETURN count(c) AS total", **params)
        return records[0]["total"]
