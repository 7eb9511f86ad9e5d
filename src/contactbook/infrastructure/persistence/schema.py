"""Constraints and indexes for :Contact nodes. Idempotent; run at startup."""

import logging

logger = logging.getLogger(__name__)

_SCHEMA_QUERIES = (
    """
    CREATE CONSTRAINT contact_id_unique IF NOT EXISTS
    FOR (c:Contact) REQUIRE c.id IS UNIQUE
    """,
    # active_email only exists on active contacts, so inactive ones never collide.
    """
    CREATE CONSTRAINT contact_active_email_unique IF NOT EXISTS
    FOR (c:Contact) REQUIRE c.active_email IS UNIQUE
    """,
    """
    CREATE INDEX contact_email IF NOT EXISTS
    FOR (c:Contact) ON (c.email)
    """,
    """
    CREATE INDEX contact_name IF NOT EXISTS
    FOR (c:Contact) ON (c.first_name, c.last_name)
    """,
    """
    CREATE INDEX contact_tags IF NOT EXISTS
    FOR (c:Contact) ON (c.tags)
    """,
)


def ensure_contact_schema(driver) -> None:
    """Create the uniqueness constraints and lookup indexes for contacts if missing."""
    with driver.session() as session:
        for query in _SCHEMA_QUERIES:
            session.run(query).consume()
    logger.info("Contact constraints and indexes are in place")
