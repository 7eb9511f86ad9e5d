"""
REST routes for /api/contacts: list, get, create, update, soft delete, search.
Each handler asks ContactService for the outcome and shapes the envelope;
store failures become a 500 with a route-specific message.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from api.responses import failure_response, server_error
from contactbook.application import ContactService, Failure, StoreError
from contactbook.domain import Contact

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


class AddressBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = Field(None, alias="zipCode")
    country: str | None = None


class ContactBody(BaseModel):
    """Request body for create and update. Constraints are checked by the domain, not here."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    email: str | None = None
    phone: str | None = None
    address: AddressBody | None = None
    company: str | None = None
    job_title: str | None = Field(None, alias="jobTitle")
    notes: str | None = None
    tags: list[str] | None = None


class AddressOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = Field(None, alias="zipCode")
    country: str


class ContactOut(BaseModel):
    """A contact as returned to clients; camelCase keys, ISO timestamps, derived fullName."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    full_name: str = Field(..., alias="fullName")
    email: str
    phone: str
    address: AddressOut | None = None
    company: str | None = None
    job_title: str | None = Field(None, alias="jobTitle")
    notes: str | None = None
    tags: list[str] = []
    is_active: bool = Field(..., alias="isActive")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    @classmethod
    def from_contact(cls, contact: Contact) -> "ContactOut":
        address = None
        if contact.address is not None:
            address = AddressOut(
                street=contact.address.street,
                city=contact.address.city,
                state=contact.address.state,
                zip_code=contact.address.zip_code,
                country=contact.address.country,
            )
        return cls(
            id=contact.id,
            first_name=contact.first_name,
            last_name=contact.last_name,
            full_name=contact.full_name,
            email=contact.email,
            phone=contact.phone,
            address=address,
            company=contact.company,
            job_title=contact.job_title,
            notes=contact.notes,
            tags=list(contact.tags),
            is_active=contact.is_active,
            created_at=contact.created_at,
            updated_at=contact.updated_at,
        )


def _contact_json(contact: Contact) -> dict:
    return ContactOut.from_contact(contact).model_dump(mode="json", by_alias=True)


def get_service(request: Request) -> ContactService:
    return ContactService(request.app.state.repository)


@router.get("")
def list_contacts(
    request: Request,
    search: str | None = None,
    tag: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    service: ContactService = Depends(get_service),
):
    try:
        result = service.list_contacts(search=search, tag=tag, page=page, limit=limit)
    except StoreError as e:
        return server_error(request, "Server Error - Could not fetch contacts", e)
    return {
        "success": True,
        "count": result.count,
        "total": result.total,
        "page": result.page,
        "pages": result.pages,
        "data": [_contact_json(c) for c in result.contacts],
    }


@router.get("/search/{term}")
def search_contacts(
    term: str,
    request: Request,
    service: ContactService = Depends(get_service),
):
    try:
        contacts = service.search_contacts(term)
    except StoreError as e:
        return server_error(request, "Server Error - Could not search contacts", e)
    return {
        "success": True,
        "count": len(contacts),
        "data": [_contact_json(c) for c in contacts],
    }


@router.get("/{contact_id}")
def get_contact(
    contact_id: str,
    request: Request,
    service: ContactService = Depends(get_service),
):
    try:
        result = service.get_contact(contact_id)
    except StoreError as e:
        return server_error(request, "Server Error - Could not fetch contact", e)
    if isinstance(result, Failure):
        return failure_response(result)
    return {"success": True, "data": _contact_json(result)}


@router.post("")
def create_contact(
    body: ContactBody,
    request: Request,
    service: ContactService = Depends(get_service),
):
    try:
        result = service.create_contact(body.model_dump(by_alias=True))
    except StoreError as e:
        return server_error(request, "Server Error - Could not create contact", e)
    if isinstance(result, Failure):
        return failure_response(result)
    return JSONResponse(
        content={
            "success": True,
            "message": "Contact created successfully",
            "data": _contact_json(result),
        },
        status_code=status.HTTP_201_CREATED,
    )


@router.put("/{contact_id}")
def update_contact(
    contact_id: str,
    body: ContactBody,
    request: Request,
    service: ContactService = Depends(get_service),
):
    changes = body.model_dump(by_alias=True, exclude_unset=True)
    try:
        result = service.update_contact(contact_id, changes)
    except StoreError as e:
        return server_error(request, "Server Error - Could not update contact", e)
    if isinstance(result, Failure):
        return failure_response(result)
    return {
        "success": True,
        "message": "Contact updated successfully",
        "data": _contact_json(result),
    }


@router.delete("/{contact_id}")
def delete_contact(
    contact_id: str,
    request: Request,
    service: ContactService = Depends(get_service),
):
    try:
        result = service.delete_contact(contact_id)
    except StoreError as e:
        return server_error(request, "Server Error - Could not delete contact", e)
    if isinstance(result, Failure):
        return failure_response(result)
    return {"success": True, "message": "Contact deleted successfully"}
