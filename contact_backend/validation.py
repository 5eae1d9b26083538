"""
Validation of contact-form submissions, independent of the HTTP layer.
"""

from __future__ import annotations

from typing import Mapping, Optional

from email_validator import EmailNotValidError, validate_email

from contact_backend.db import (
    EMAIL_MAX_LENGTH,
    MESSAGE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    SUBJECT_MAX_LENGTH,
    ContactSubmission,
)
from contact_backend.errors import ValidationError

# (payload key, display name, max length)
CONTACT_FIELDS = (
    ("name", "Name", NAME_MAX_LENGTH),
    ("email", "Email", EMAIL_MAX_LENGTH),
    ("subject", "Subject", SUBJECT_MAX_LENGTH),
    ("message", "Message", MESSAGE_MAX_LENGTH),
)


def _is_plausible_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_contact(data: Mapping[str, Optional[str]]) -> list[str]:
    """
    Return every validation failure for a candidate submission, in field order.

    An empty list means the submission can be stored.
    """
    errors: list[str] = []
    for key, label, max_length in CONTACT_FIELDS:
        value = data.get(key)
        if value is None or not value.strip():
            errors.append(f"The {label} field is required.")
            continue
        if len(value) > max_length:
            errors.append(
                f"The field {label} must be a string with a maximum length of {max_length}."
            )
            continue
        if key == "email" and not _is_plausible_email(value):
            errors.append("The Email field is not a valid e-mail address.")
    return errors


def build_submission(data: Mapping[str, Optional[str]]) -> ContactSubmission:
    """Validate ``data`` and return a submission, or raise ValidationError."""
    errors = validate_contact(data)
    if errors:
        raise ValidationError(errors)
    return ContactSubmission(
        name=data["name"],
        email=data["email"],
        subject=data["subject"],
        message=data["message"],
    )
