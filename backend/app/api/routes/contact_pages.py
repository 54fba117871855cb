"""
Contact form pages (signed-in visitors only)
"""
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from app.core.auth import SessionIdentity, require_session
from app.core.database import get_db
from app.core.errors import PersistenceError, ValidationError
from app.core.logging_config import LoggingConfig
from app.core.templates import render_template
from app.services.contact_service import ContactService
from app.services.contact_validation import CONTACT_FIELDS, validate_submission

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(tags=["contact"])

SUCCESS_NOTICE = {
    "kind": "success",
    "title": "Message sent!",
    "description": "We'll get back to you as soon as possible.",
}
FAILURE_NOTICE = {
    "kind": "error",
    "title": "Error",
    "description": "Failed to send message. Please try again.",
}


def _form_context(identity, values=None, errors=None, notice=None) -> dict:
    return {
        "identity": identity,
        "values": values or {field: "" for field in CONTACT_FIELDS},
        "errors": errors or {},
        "notice": notice,
    }


@router.get("/contact", response_class=HTMLResponse)
async def contact_page(
    request: Request,
    identity: SessionIdentity = Depends(require_session),
):
    """Empty contact form; shows the success notice after a redirect from a successful post"""
    notice = SUCCESS_NOTICE if request.query_params.get("sent") == "1" else None
    return render_template("contact/form.html", _form_context(identity, notice=notice), request)


@router.post("/contact", response_class=HTMLResponse)
async def submit_contact(
    request: Request,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Validate and store a submission"""
    form = await request.form()
    values = {field: str(form.get(field) or "") for field in CONTACT_FIELDS}

    try:
        submission = validate_submission(values)
    except ValidationError as e:
        logger.info("Contact submission rejected", extra={"fields": sorted(e.field_errors)})
        return render_template(
            "contact/form.html",
            _form_context(identity, values=values, errors=e.field_errors),
            request,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    try:
        ContactService(db).create(
            name=submission.name,
            email=submission.email,
            message=submission.message,
        )
    except PersistenceError:
        return render_template(
            "contact/form.html",
            _form_context(identity, values=values, notice=FAILURE_NOTICE),
            request,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return RedirectResponse(url="/contact?sent=1", status_code=status.HTTP_303_SEE_OTHER)
