"""
Validation schema for contact form submissions
"""
from typing import Any, Dict, Mapping

import email_validator
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ValidationError

# Checked in this order; each field is validated independently
CONTACT_FIELDS = ("name", "email", "message")

FIELD_MESSAGES = {
    "name": "Name must be at least 2 characters",
    "email": "Invalid email address",
    "message": "Message must be at least 10 characters",
}

# Addresses are checked against the grammar only, so reserved names such as
# .test, .local and localhost pass. The setting is process-wide.
email_validator.SPECIAL_USE_DOMAIN_NAMES = []


class ContactSubmission(BaseModel):
    """Accepted, normalized contact submission"""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    name: str = Field(..., min_length=2)
    email: str
    message: str = Field(..., min_length=10)

    @field_validator("email")
    @classmethod
    def email_matches_grammar(cls, value: str) -> str:
        # No DNS lookup; dotless domains allowed; "Name <addr>" rejected
        try:
            result = validate_email(value, check_deliverability=False, globally_deliverable=False)
        except EmailNotValidError as e:
            raise ValueError(str(e)) from e
        return result.normalized


def validate_submission(candidate: Mapping[str, Any]) -> ContactSubmission:
    """
    Check an untrusted candidate against the contact schema

    Args:
        candidate: Mapping with name, email and message values (extra keys are ignored)

    Returns:
        ContactSubmission with whitespace-trimmed values

    Raises:
        ValidationError: field_errors maps each failing field to its message
    """
    data = {field: candidate.get(field) for field in CONTACT_FIELDS}
    try:
        return ContactSubmission(**data)
    except PydanticValidationError as e:
        raise ValidationError(_field_errors(e)) from e


def _field_errors(error: PydanticValidationError) -> Dict[str, str]:
    """First failure per field, in schema order"""
    failed = set()
    for item in error.errors():
        loc = item.get("loc") or ()
        if loc and loc[0] in FIELD_MESSAGES:
            failed.add(loc[0])
    return {field: FIELD_MESSAGES[field] for field in CONTACT_FIELDS if field in failed}
