"""
Tests for the contact form validation schema
"""
import pytest

from app.core.errors import ValidationError
from app.services.contact_validation import (FIELD_MESSAGES,
                                             ContactSubmission,
                                             validate_submission)


def test_valid_submission_is_accepted():
    submission = validate_submission({
        "name": "Jane Doe",
        "email": "jane@example.com",
        "message": "I'd like to book a session",
    })

    assert isinstance(submission, ContactSubmission)
    assert submission.name == "Jane Doe"
    assert submission.email == "jane@example.com"
    assert submission.message == "I'd like to book a session"


def test_values_are_trimmed_before_checks():
    submission = validate_submission({
        "name": "  Al  ",
        "email": " al@example.com ",
        "message": "   0123456789   ",
    })

    assert submission.name == "Al"
    assert submission.email == "al@example.com"
    assert submission.message == "0123456789"


def test_boundary_lengths_are_accepted():
    submission = validate_submission({"name": "Jo", "email": "jo@example.com", "message": "x" * 10})
    assert submission.name == "Jo"


def test_every_failing_field_is_reported():
    with pytest.raises(ValidationError) as exc_info:
        validate_submission({"name": "A", "email": "not-an-email", "message": "short"})

    assert exc_info.value.field_errors == {
        "name": "Name must be at least 2 characters",
        "email": "Invalid email address",
        "message": "Message must be at least 10 characters",
    }
    assert exc_info.value.fields == {"name", "email", "message"}


def test_only_failing_fields_are_reported():
    with pytest.raises(ValidationError) as exc_info:
        validate_submission({"name": "Jane", "email": "jane@example.com", "message": "too short"})

    assert exc_info.value.field_errors == {"message": FIELD_MESSAGES["message"]}


def test_whitespace_only_name_is_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_submission({"name": "   ", "email": "jane@example.com", "message": "long enough message"})

    assert exc_info.value.fields == {"name"}


@pytest.mark.parametrize("email", ["", "jane", "jane@", "@example.com", "jane@@example.com"])
def test_malformed_email_is_rejected(email):
    with pytest.raises(ValidationError) as exc_info:
        validate_submission({"name": "Jane", "email": email, "message": "long enough message"})

    assert exc_info.value.field_errors == {"email": "Invalid email address"}


@pytest.mark.parametrize("email", ["al@dogs.test", "al@kennel.local", "al@localhost"])
def test_special_use_domains_are_accepted(email):
    submission = validate_submission({"name": "Al", "email": email, "message": "Please call me back"})

    assert submission.email == email


def test_display_name_form_is_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_submission({"name": "Bob", "email": "Bob <bob@example.com>", "message": "long enough message"})

    assert exc_info.value.field_errors == {"email": "Invalid email address"}


def test_missing_fields_are_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_submission({})

    assert exc_info.value.fields == {"name", "email", "message"}


def test_extra_fields_are_ignored():
    submission = validate_submission({
        "name": "Jane",
        "email": "jane@example.com",
        "message": "long enough message",
        "phone": "555-0100",
    })
    assert not hasattr(submission, "phone")


def test_two_violations_name_exactly_those_fields():
    with pytest.raises(ValidationError) as exc_info:
        validate_submission({"name": "A", "email": "al@example.com", "message": "short"})

    assert exc_info.value.fields == {"name", "message"}
