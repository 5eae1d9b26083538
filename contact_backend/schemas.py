"""
Pydantic schemas for the contact backend.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from contact_backend.db import ContactRecord


class ContactCreateRequest(BaseModel):
    # Fields are optional here; limits are enforced by validation.validate_contact
    # so failures come back as a single 400 message.
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class ContactCreateResponse(BaseModel):
    success: bool
    message: str
    contactId: Optional[int] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


class ContactResponse(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    createdAt: datetime
    isRead: bool

    @classmethod
    def from_record(cls, record: ContactRecord) -> "ContactResponse":
        return cls(
            id=record.id,
            name=record.name,
            email=record.email,
            subject=record.subject,
            message=record.message,
            createdAt=record.created_at,
            isRead=record.is_read,
        )
