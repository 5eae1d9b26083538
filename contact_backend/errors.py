"""
Error taxonomy shared by the data layer and the HTTP handlers.
"""

from __future__ import annotations


class ContactError(Exception):
    """Base class for contact backend errors."""

    status_code: int = 500


class ValidationError(ContactError):
    """Submission is missing a field, has an oversized field, or a bad email."""

    status_code = 400

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return ", ".join(self.errors)


class NotFoundError(ContactError):
    status_code = 404

    def __init__(self, contact_id: int):
        self.contact_id = contact_id
        super().__init__(f"Contact {contact_id} not found")


class StorageError(ContactError):
    """The store is unreachable or rejected the write."""


class UnexpectedError(ContactError):
    """Anything else that escaped the data layer."""
