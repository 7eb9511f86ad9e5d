#!/usr/bin/env python3
"""Seed the store with sample contacts.

Removes every existing :Contact node, then creates five sample contacts through
ContactService so they are validated and normalized like API input. Run from
repo root with .env (NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD).
"""
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from neo4j import GraphDatabase  # noqa: E402

from api.settings import Settings, load_env_file  # noqa: E402
from contactbook.application import ContactService, Failure  # noqa: E402
from contactbook.infrastructure import (  # noqa: E402
    Neo4jContactRepository,
    ensure_contact_schema,
)

load_env_file()

SAMPLE_CONTACTS = [
    {
        "firstName": "Alice",
        "lastName": "Johnson",
        "email": "alice.johnson@example.com",
        "phone": "+1234567890",
        "address": {
            "street": "123 Tech Street",
            "city": "San Francisco",
            "state": "CA",
            "zipCode": "94105",
            "country": "USA",
        },
        "company": "TechCorp",
        "jobTitle": "Software Engineer",
        "notes": "Full-stack developer specializing in React and Node.js",
        "tags": ["work", "developer", "tech"],
    },
    {
        "firstName": "Bob",
        "lastName": "Smith",
        "email": "bob.smith@example.com",
        "phone": "+1987654321",
        "address": {
            "street": "456 Design Ave",
            "city": "New York",
            "state": "NY",
            "zipCode": "10001",
            "country": "USA",
        },
        "company": "Creative Studio",
        "jobTitle": "UI/UX Designer",
        "notes": "Excellent eye for design and user experience",
        "tags": ["work", "design", "creative"],
    },
    {
        "firstName": "Carol",
        "lastName": "Davis",
        "email": "carol.davis@example.com",
        "phone": "+1555123456",
        "address": {
            "street": "789 Business Blvd",
            "city": "Chicago",
            "state": "IL",
            "zipCode": "60601",
            "country": "USA",
        },
        "company": "Marketing Plus",
        "jobTitle": "Marketing Manager",
        "notes": "Great at digital marketing campaigns",
        "tags": ["work", "marketing", "manager"],
    },
    {
        "firstName": "David",
        "lastName": "Wilson",
        "email": "david.wilson@example.com",
        "phone": "+1777888999",
        "address": {
            "street": "321 Friend Lane",
            "city": "Austin",
            "state": "TX",
            "zipCode": "73301",
            "country": "USA",
        },
        "company": "Freelancer",
        "jobTitle": "Photographer",
        "notes": "Amazing wedding and portrait photographer",
        "tags": ["friend", "photographer", "creative"],
    },
    {
        "firstName": "Emma",
        "lastName": "Brown",
        "email": "emma.brown@example.com",
        "phone": "+1666555444",
        "address": {
            "street": "654 Family Road",
            "city": "Seattle",
            "state": "WA",
            "zipCode": "98101",
            "country": "USA",
        },
        "company": "Healthcare Corp",
        "jobTitle": "Nurse",
        "notes": "Family friend and healthcare professional",
        "tags": ["family", "healthcare", "friend"],
    },
]

_CLEAR_CONTACTS = """
MATCH (c:Contact)
DETACH DELETE c
"""


def main() -> int:
    settings = Settings.from_env()
    driver = GraphDatabase.driver(
        settings.neo4j_uri, auth=(settings.neo4j_user, settings.neo4j_password)
    )
    try:
        ensure_contact_schema(driver)
        with driver.session() as session:
            summary = session.run(_CLEAR_CONTACTS).consume()
            print(f"Cleared {summary.counters.nodes_deleted} existing contact(s).")

        service = ContactService(Neo4jContactRepository(driver))
        created = []
        for raw in SAMPLE_CONTACTS:
            result = service.create_contact(raw)
            if isinstance(result, Failure):
                print(f"Skipped {raw['email']}: {result.message}", file=sys.stderr)
                continue
            created.append(result)

        print(f"Created {len(created)} sample contact(s):")
        for index, contact in enumerate(created, start=1):
            print(f"{index}. {contact.full_name} - {contact.email}")
        return 0
    except Exception as e:
        print(f"Seeding failed: {e}", file=sys.stderr)
        return 1
    finally:
        driver.close()


if __name__ == "__main__":
    sys.exit(main())
