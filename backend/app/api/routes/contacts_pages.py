"""
Submission listing page (signed-in visitors only)
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from app.core.auth import SessionIdentity, require_session
from app.core.database import get_db
from app.core.errors import PersistenceError
from app.core.logging_config import LoggingConfig
from app.core.templates import render_template
from app.services.contact_service import ContactService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(tags=["contacts"])


@router.get("/contacts", response_class=HTMLResponse)
async def contacts_page(
    request: Request,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """All contact submissions, newest first; read failures fall back to the empty state"""
    try:
        contacts = ContactService(db).list_all()
    except PersistenceError:
        logger.warning("Showing empty submissions list after a read failure")
        contacts = []

    return render_template(
        "contacts/list.html", {"contacts": contacts, "identity": identity}, request
    )
