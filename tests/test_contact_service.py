"""Unit tests for ContactService. No Neo4j; in-memory repo only."""

import threading

import pytest

from contactbook.application import (
    ContactDeleted,
    ContactPage,
    ContactService,
    ErrorKind,
    Failure,
    StoreError,
)
from contactbook.domain import Contact
from contactbook.infrastructure import InMemoryContactRepository

MISSING_ID = "2f0c6f5e-4b1a-4c53-9a51-0e7f0c2d7b11"


def _service(repo: InMemoryContactRepository | None = None) -> ContactService:
    return ContactService(repository=repo or InMemoryContactRepository())


def _raw(first="Alice", last="Johnson", email="alice.johnson@example.com", **extra) -> dict:
    return {"firstName": first, "lastName": last, "email": email, "phone": "+1234567890", **extra}


def _create(service: ContactService, **kwargs) -> Contact:
    result = service.create_contact(_raw(**kwargs))
    assert isinstance(result, Contact), result
    return result


def test_create_then_get_returns_normalized_contact() -> None:
    service = _service()
    created = service.create_contact(
        _raw(first="aLICE", last="johnson", email="Alice.Johnson@Example.com", tags=["Work", "DEV"])
    )
    assert isinstance(created, Contact)

    fetched = service.get_contact(created.id)
    assert isinstance(fetched, Contact)
    assert fetched.first_name == "Alice"
    assert fetched.last_name == "Johnson"
    assert fetched.email == "alice.johnson@example.com"
    assert fetched.tags == ("work", "dev")
    assert fetched.is_active is True


def test_create_invalid_returns_every_message() -> None:
    service = _service()
    raw = _raw(email="nope")
    del raw["firstName"]
    result = service.create_contact(raw)
    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.VALIDATION
    assert result.message == "Validation Error"
    assert set(result.details) == {"First name is required", "Please provide a valid email address"}


def test_duplicate_email_is_case_insensitive() -> None:
    service = _service()
    _create(service, email="a@x.com")
    result = service.create_contact(_raw(first="Other", email="A@X.com"))
    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.DUPLICATE_EMAIL
    assert result.message == "Contact with this email already exists"


def test_email_of_deleted_contact_can_be_reused() -> None:
    service = _service()
    first = _create(service, email="a@x.com")
    assert isinstance(service.delete_contact(first.id), ContactDeleted)
    second = service.create_contact(_raw(email="a@x.com"))
    assert isinstance(second, Contact)
    assert second.id != first.id


def test_get_missing_and_malformed() -> None:
    service = _service()
    missing = service.get_contact(MISSING_ID)
    assert isinstance(missing, Failure)
    assert missing.kind is ErrorKind.NOT_FOUND
    assert missing.message == "Contact not found"

    malformed = service.get_contact("not-an-id")
    assert isinstance(malformed, Failure)
    assert malformed.kind is ErrorKind.MALFORMED_IDENTIFIER
    assert malformed.message == "Invalid contact ID format"


def test_soft_delete_hides_contact_everywhere_but_keeps_it_stored() -> None:
    repo = InMemoryContactRepository()
    service = _service(repo)
    alice = _create(service)
    _create(service, first="Bob", last="Smith", email="bob@example.com")

    result = service.delete_contact(alice.id)
    assert isinstance(result, ContactDeleted)
    assert result.contact_id == alice.id

    assert isinstance(service.get_contact(alice.id), Failure)
    assert [c.first_name for c in service.list_contacts().contacts] == ["Bob"]
    assert service.search_contacts("alice") == []

    stored = repo.get_by_id(alice.id, include_inactive=True)
    assert stored is not None
    assert stored.is_active is False


def test_delete_twice_is_not_found() -> None:
    service = _service()
    alice = _create(service)
    service.delete_contact(alice.id)
    again = service.delete_contact(alice.id)
    assert isinstance(again, Failure)
    assert again.kind is ErrorKind.NOT_FOUND
    assert service.delete_contact("bad").kind is ErrorKind.MALFORMED_IDENTIFIER


def test_update_is_partial_and_renormalizes() -> None:
    service = _service()
    alice = _create(service, company="TechCorp", tags=["work"])
    updated = service.update_contact(alice.id, {"lastName": "SMITH", "tags": ["Friend"]})
    assert isinstance(updated, Contact)
    assert updated.first_name == "Alice"
    assert updated.last_name == "Smith"
    assert updated.company == "TechCorp"
    assert updated.tags == ("friend",)
    assert updated.created_at == alice.created_at
    assert updated.updated_at >= alice.updated_at


def test_update_null_clears_optional_field() -> None:
    service = _service()
    alice = _create(service, company="TechCorp")
    updated = service.update_contact(alice.id, {"company": None})
    assert isinstance(updated, Contact)
    assert updated.company is None


def test_update_validation_failure() -> None:
    service = _service()
    alice = _create(service)
    result = service.update_contact(alice.id, {"phone": "abc", "firstName": ""})
    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.VALIDATION
    assert set(result.details) == {"Please provide a valid phone number", "First name is required"}
    assert service.get_contact(alice.id).phone == "+1234567890"


def test_update_ignores_read_only_keys() -> None:
    service = _service()
    alice = _create(service)
    updated = service.update_contact(alice.id, {"isActive": False, "id": MISSING_ID, "notes": "hi"})
    assert isinstance(updated, Contact)
    assert updated.id == alice.id
    assert updated.is_active is True
    assert updated.notes == "hi"


def test_update_to_taken_email_fails() -> None:
    service = _service()
    _create(service, email="a@x.com")
    bob = _create(service, first="Bob", email="b@x.com")
    result = service.update_contact(bob.id, {"email": " A@X.COM "})
    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.DUPLICATE_EMAIL
    assert result.message == "Another contact with this email already exists"


def test_update_keeping_own_email_is_allowed() -> None:
    service = _service()
    alice = _create(service, email="a@x.com")
    updated = service.update_contact(alice.id, {"email": "A@x.com", "jobTitle": "CTO"})
    assert isinstance(updated, Contact)
    assert updated.email == "a@x.com"
    assert updated.job_title == "CTO"


def test_update_missing_deleted_or_malformed() -> None:
    service = _service()
    alice = _create(service)
    service.delete_contact(alice.id)
    assert service.update_contact(alice.id, {"notes": "x"}).kind is ErrorKind.NOT_FOUND
    assert service.update_contact(MISSING_ID, {"notes": "x"}).kind is ErrorKind.NOT_FOUND
    assert service.update_contact("123", {"notes": "x"}).kind is ErrorKind.MALFORMED_IDENTIFIER


def test_pagination_math() -> None:
    service = _service()
    for i in range(25):
        _create(service, first=f"Person{i}", email=f"p{i}@example.com")
    page = service.list_contacts(page="2", limit="10")
    assert isinstance(page, ContactPage)
    assert page.count == 10
    assert page.total == 25
    assert page.page == 2
    assert page.pages == 3

    last = service.list_contacts(page=3, limit=10)
    assert last.count == 5


def test_invalid_pagination_falls_back() -> None:
    service = _service()
    for i in range(12):
        _create(service, first=f"Person{i}", email=f"p{i}@example.com")
    page = service.list_contacts(page="abc", limit="-5")
    assert page.page == 1
    assert page.limit == 10
    assert page.count == 10
    assert page.pages == 2


def test_list_filters_by_search_and_tag() -> None:
    service = _service()
    _create(service, tags=["work"])
    _create(service, first="Bob", last="Smith", email="bob@example.com", tags=["friend"])
    _create(service, first="Carol", last="Davis", email="carol@alice.org", tags=["work"])

    names = {c.first_name for c in service.list_contacts(search="ALICE").contacts}
    assert names == {"Alice", "Carol"}

    names = {c.first_name for c in service.list_contacts(tag="WORK").contacts}
    assert names == {"Alice", "Carol"}

    names = {c.first_name for c in service.list_contacts(search="alice", tag="friend").contacts}
    assert names == set()


def test_list_is_newest_first() -> None:
    service = _service()
    first = _create(service, first="First", email="first@example.com")
    second = _create(service, first="Second", email="second@example.com")
    if second.created_at == first.created_at:
        pytest.skip("clock did not advance between creates")
    assert [c.first_name for c in service.list_contacts().contacts] == ["Second", "First"]


def test_search_is_case_insensitive_substring() -> None:
    service = _service()
    _create(service)
    for term in ("ALICE", "johnson", "alice.johnson@example.com", "ohns"):
        results = service.search_contacts(term)
        assert [c.full_name for c in results] == ["Alice Johnson"], term


def test_search_covers_company_and_sorts_by_first_name() -> None:
    service = _service()
    _create(service, first="Zed", email="z@example.com", company="TechCorp")
    _create(service, first="Amy", email="amy@example.com", company="Tech Labs")
    _create(service, first="Bob", email="bob@example.com", company="Bakery")
    assert [c.first_name for c in service.search_contacts("tech")] == ["Amy", "Zed"]


def test_search_blank_term_returns_empty() -> None:
    service = _service()
    _create(service)
    assert service.search_contacts("   ") == []


class _BrokenRepository(InMemoryContactRepository):
    def count(self, contact_filter):
        raise StoreError(ErrorKind.STORE_FAILURE, "connection refused")


def test_store_failure_propagates() -> None:
    service = _service(_BrokenRepository())
    with pytest.raises(StoreError) as excinfo:
        service.list_contacts()
    assert excinfo.value.kind is ErrorKind.STORE_FAILURE


class _RacingRepository(InMemoryContactRepository):
    """Simulates another request creating the same email between the check and the write."""

    def find_active_by_email(self, email, *, exclude_id=None):
        return None


def test_store_constraint_catches_duplicate_race() -> None:
    service = _service(_RacingRepository())
    _create(service, email="a@x.com")
    result = service.create_contact(_raw(email="a@x.com"))
    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.DUPLICATE_EMAIL


def test_reads_while_writing_from_other_threads() -> None:
    service = _service()
    errors: list[BaseException] = []
    done = threading.Event()

    def write() -> None:
        try:
            for i in range(300):
                _create(service, first=f"Person{i}", email=f"p{i}@example.com")
        except BaseException as e:
            errors.append(e)
        finally:
            done.set()

    def read() -> None:
        try:
            while not done.is_set():
                service.list_contacts()
                service.search_contacts("a")
        except BaseException as e:
            errors.append(e)

    threads = [threading.Thread(target=write)] + [threading.Thread(target=read) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert service.list_contacts().total == 300
