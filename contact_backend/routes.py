"""
HTTP routes for the contact backend API.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from contact_backend.db import DbClient
from contact_backend.dependencies import get_db_client
from contact_backend.errors import (
    NotFoundError,
    StorageError,
    UnexpectedError,
    ValidationError,
)
from contact_backend.schemas import (
    ContactCreateRequest,
    ContactCreateResponse,
    ContactResponse,
    ErrorResponse,
)
from contact_backend.validation import build_submission

logger = logging.getLogger(__name__)

router = APIRouter()

THANK_YOU_MESSAGE = "Thank you for your message! I'll get back to you soon."
DEFAULT_FAILURE_MESSAGE = "Something went wrong. Please try again later."
CREATE_FAILED_MESSAGE = DEFAULT_FAILURE_MESSAGE
LIST_FAILED_MESSAGE = "Error retrieving contacts"
GET_FAILED_MESSAGE = "Error retrieving contact"
UPDATE_FAILED_MESSAGE = "Error updating contact"

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

T = TypeVar("T")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


def _call_store(operation: Callable[..., T], *args) -> T:
    """Run a data-layer call; anything other than StorageError becomes UnexpectedError."""
    try:
        return operation(*args)
    except StorageError:
        raise
    except Exception as exc:
        raise UnexpectedError(f"{type(exc).__name__}: {exc}") from exc


@router.post(
    "/contacts", response_model=ContactCreateResponse, responses=_ERROR_RESPONSES
)
def create_contact(
    payload: ContactCreateRequest, db: DbClient = Depends(get_db_client)
):
    """
    Validate and store a contact-form submission.
    """
    try:
        submission = build_submission(payload.model_dump())
    except ValidationError as exc:
        logger.warning("Rejected contact submission: %s", exc.message)
        return _error_response(400, exc.message)

    try:
        contact_id = _call_store(db.insert, submission)
    except (StorageError, UnexpectedError):
        logger.exception("Error creating contact")
        return _error_response(500, CREATE_FAILED_MESSAGE)

    logger.info(
        "New contact form submitted by %s (%s)", submission.name, submission.email
    )
    return ContactCreateResponse(
        success=True, message=THANK_YOU_MESSAGE, contactId=contact_id
    )


@router.get(
    "/contacts",
    response_model=list[ContactResponse],
    responses={500: {"model": ErrorResponse}},
)
def list_contacts(db: DbClient = Depends(get_db_client)):
    try:
        records = _call_store(db.list_all)
    except (StorageError, UnexpectedError):
        logger.exception("Error retrieving contacts")
        return _error_response(500, LIST_FAILED_MESSAGE)
    return [ContactResponse.from_record(record) for record in records]


@router.get(
    "/contacts/{contact_id}",
    response_model=ContactResponse,
    responses={404: {"description": "Contact not found"}, 500: {"model": ErrorResponse}},
)
def get_contact(contact_id: int, db: DbClient = Depends(get_db_client)):
    try:
        record = _call_store(db.find_by_id, contact_id)
    except (StorageError, UnexpectedError):
        logger.exception("Error retrieving contact with ID %s", contact_id)
        return _error_response(500, GET_FAILED_MESSAGE)
    if record is None:
        raise NotFoundError(contact_id)
    return ContactResponse.from_record(record)


@router.put(
    "/contacts/{contact_id}/mark-read",
    status_code=204,
    response_class=Response,
    responses={404: {"description": "Contact not found"}, 500: {"model": ErrorResponse}},
)
def mark_contact_read(contact_id: int, db: DbClient = Depends(get_db_client)):
    """
    Flag a submission as read. Marking an already-read submission is a no-op.
    """
    try:
        found = _call_store(db.mark_read, contact_id)
    except (StorageError, UnexpectedError):
        logger.exception("Error marking contact %s as read", contact_id)
        return _error_response(500, UPDATE_FAILED_MESSAGE)
    if not found:
        raise NotFoundError(contact_id)
    logger.info("Contact %s marked as read", contact_id)
    return Response(status_code=204)


_FAILURE_MESSAGES = {
    create_contact: CREATE_FAILED_MESSAGE,
    list_contacts: LIST_FAILED_MESSAGE,
    get_contact: GET_FAILED_MESSAGE,
    mark_contact_read: UPDATE_FAILED_MESSAGE,
}


def failure_message_for(endpoint) -> str:
    """Client-facing 500 message for the route that was handling the request."""
    return _FAILURE_MESSAGES.get(endpoint, DEFAULT_FAILURE_MESSAGE)
