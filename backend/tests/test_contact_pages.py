"""
Tests for the contact form pages
"""
from sqlalchemy.exc import OperationalError

from app.services.contact_service import ContactService

VALID_FORM = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "message": "I'd like to book a session",
}


def test_contact_page_requires_sign_in(anonymous_client):
    response = anonymous_client.get("/contact", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/sign-in?redirect_url=%2Fcontact"


def test_contact_post_requires_sign_in(anonymous_client, db):
    response = anonymous_client.post("/contact", data=VALID_FORM, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"].startswith("/sign-in?")
    assert ContactService(db).count() == 0


def test_contact_page_renders_empty_form(signed_in_client):
    response = signed_in_client.get("/contact")

    assert response.status_code == 200
    assert 'name="name"' in response.text
    assert 'name="email"' in response.text
    assert 'name="message"' in response.text
    assert "Sending..." in response.text
    assert "Message sent!" not in response.text


def test_valid_submission_is_stored_and_confirmed(signed_in_client, db):
    response = signed_in_client.post("/contact", data=VALID_FORM, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/contact?sent=1"

    contacts = ContactService(db).list_all()
    assert len(contacts) == 1
    assert contacts[0].name == "Jane Doe"
    assert contacts[0].email == "jane@example.com"
    assert contacts[0].message == "I'd like to book a session"

    confirmation = signed_in_client.get(response.headers["location"])
    assert confirmation.status_code == 200
    assert "Message sent!" in confirmation.text
    # The form is cleared after a successful send
    assert "Jane Doe" not in confirmation.text


def test_submission_shows_up_in_listing(signed_in_client):
    signed_in_client.post("/contact", data=VALID_FORM)

    listing = signed_in_client.get("/contacts")
    assert listing.status_code == 200
    assert "Jane Doe" in listing.text
    assert "mailto:jane@example.com" in listing.text


def test_invalid_submission_shows_every_field_error(signed_in_client, db, monkeypatch):
    calls = []
    monkeypatch.setattr(ContactService, "create", lambda self, **kwargs: calls.append(kwargs))

    response = signed_in_client.post(
        "/contact",
        data={"name": "A", "email": "not-an-email", "message": "short"},
    )

    assert response.status_code == 422
    assert "Name must be at least 2 characters" in response.text
    assert "Invalid email address" in response.text
    assert "Message must be at least 10 characters" in response.text
    # Entered values are kept
    assert 'value="not-an-email"' in response.text
    assert calls == []
    monkeypatch.undo()
    assert ContactService(db).count() == 0


def test_missing_fields_are_rejected(signed_in_client, db):
    response = signed_in_client.post("/contact", data={})

    assert response.status_code == 422
    assert "Name must be at least 2 characters" in response.text
    assert ContactService(db).count() == 0


def test_store_failure_shows_error_and_keeps_values(signed_in_client, db, monkeypatch):
    def broken_commit():
        raise OperationalError("INSERT INTO contacts", {}, Exception("database is down"))

    monkeypatch.setattr(db, "commit", broken_commit)

    response = signed_in_client.post("/contact", data=VALID_FORM, follow_redirects=False)

    assert response.status_code == 503
    assert "Failed to send message. Please try again." in response.text
    assert 'value="Jane Doe"' in response.text
    assert 'value="jane@example.com"' in response.text
    assert "Message sent!" not in response.text
    assert ContactService(db).count() == 0


def test_resubmitting_stores_a_second_row(signed_in_client, db):
    signed_in_client.post("/contact", data=VALID_FORM)
    signed_in_client.post("/contact", data=VALID_FORM)

    assert ContactService(db).count() == 2


def test_short_name_and_message_report_two_errors(signed_in_client, db):
    response = signed_in_client.post(
        "/contact",
        data={"name": "A", "email": "al@example.com", "message": "short"},
    )

    assert response.status_code == 422
    assert "Name must be at least 2 characters" in response.text
    assert "Message must be at least 10 characters" in response.text
    assert "Invalid email address" not in response.text
    assert ContactService(db).count() == 0


def test_minimal_valid_submission(signed_in_client, db):
    response = signed_in_client.post(
        "/contact",
        data={"name": "Al", "email": "al@example.com", "message": "Please call me back"},
    )

    # Redirect followed: the form comes back empty with the success notice
    assert response.status_code == 200
    assert "Message sent!" in response.text
    assert 'value="Al"' not in response.text
    assert [c.name for c in ContactService(db).list_all()] == ["Al"]
