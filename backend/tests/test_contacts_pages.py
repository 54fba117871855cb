"""
Tests for the submission listing page
"""
from sqlalchemy.exc import OperationalError

from app.services.contact_service import ContactService


def test_listing_redirects_anonymous_without_reading_store(anonymous_client, monkeypatch):
    reads = []
    original = ContactService.list_all

    def spy(self):
        reads.append(1)
        return original(self)

    monkeypatch.setattr(ContactService, "list_all", spy)

    response = anonymous_client.get("/contacts", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/sign-in?redirect_url=%2Fcontacts"
    assert reads == []


def test_listing_shows_newest_first(signed_in_client, db):
    service = ContactService(db)
    service.create(name="Alice Walker", email="alice@example.com", message="First message here")
    service.create(name="Bob Barker", email="bob@example.com", message="Second message here")

    response = signed_in_client.get("/contacts")

    assert response.status_code == 200
    assert response.text.index("Bob Barker") < response.text.index("Alice Walker")
    assert "mailto:alice@example.com" in response.text
    assert "mailto:bob@example.com" in response.text


def test_listing_shows_formatted_timestamp(signed_in_client, db):
    from app.core.templates import friendly_datetime

    contact = ContactService(db).create(name="Alice Walker", email="alice@example.com", message="First message here")

    response = signed_in_client.get("/contacts")

    assert friendly_datetime(contact.created_at) in response.text


def test_listing_keeps_message_line_breaks(signed_in_client, db):
    ContactService(db).create(name="Alice Walker", email="alice@example.com", message="Line one\nLine two")

    response = signed_in_client.get("/contacts")

    assert "Line one\nLine two" in response.text
    assert "pre-line" in response.text


def test_listing_escapes_user_content(signed_in_client, db):
    ContactService(db).create(name="<b>Mallory</b>", email="m@example.com", message="<script>alert(1)</script>")

    response = signed_in_client.get("/contacts")

    assert "<script>alert(1)</script>" not in response.text
    assert "&lt;b&gt;Mallory&lt;/b&gt;" in response.text


def test_empty_listing(signed_in_client):
    response = signed_in_client.get("/contacts")

    assert response.status_code == 200
    assert "No contact form submissions yet." in response.text


def test_read_failure_falls_back_to_empty_state(signed_in_client, db, monkeypatch):
    ContactService(db).create(name="Alice Walker", email="alice@example.com", message="First message here")

    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is down"))

    monkeypatch.setattr(db, "query", broken_query)

    response = signed_in_client.get("/contacts")

    assert response.status_code == 200
    assert "No contact form submissions yet." in response.text
    assert "Alice Walker" not in response.text
