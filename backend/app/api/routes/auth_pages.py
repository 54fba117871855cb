"""
Sign-in, sign-up and sign-out pages
"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.auth import (SessionIdentity, extract_session_token,
                           get_optional_session, safe_redirect_target)
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import DuplicateEmailError
from app.core.logging_config import LoggingConfig
from app.core.templates import render_template
from app.models.user import User
from app.services.auth_service import (MAX_PASSWORD_BYTES, AuthService,
                                       password_fits)

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(tags=["auth"])

SIGN_UP_MESSAGES = {
    "first_name": "First name is required",
    "last_name": "Last name is required",
    "email": "Invalid email address",
    "password": f"Password must be at least 8 characters and at most {MAX_PASSWORD_BYTES} bytes",
}


class SignUpForm(BaseModel):
    """User registration form"""
    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8)

    @field_validator("password")
    @classmethod
    def password_within_bcrypt_limit(cls, value: str) -> str:
        if not password_fits(value):
            raise ValueError(f"Password is longer than {MAX_PASSWORD_BYTES} bytes")
        return value


def _sign_up_errors(error: PydanticValidationError) -> Dict[str, str]:
    errors = {}
    for item in error.errors():
        loc = item.get("loc") or ()
        if loc and loc[0] in SIGN_UP_MESSAGES and loc[0] not in errors:
            errors[loc[0]] = SIGN_UP_MESSAGES[loc[0]]
    return errors


def _signed_in_redirect(
    user: User,
    auth_service: AuthService,
    settings: Settings,
    redirect_url: str,
) -> RedirectResponse:
    """Create a session for the user and send them on with the session cookie set"""
    session = auth_service.create_session(user.id)
    response = RedirectResponse(url=redirect_url, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=settings.session_duration_hours * 60 * 60,
    )
    return response


@router.get("/sign-in", response_class=HTMLResponse)
async def sign_in_page(
    request: Request,
    redirect_url: Optional[str] = None,
    identity: Optional[SessionIdentity] = Depends(get_optional_session),
):
    """Sign-in page"""
    target = safe_redirect_target(redirect_url)
    if identity is not None:
        return RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)
    return render_template(
        "auth/sign_in.html",
        {"redirect_url": target, "email": "", "error": None},
        request,
    )


@router.post("/sign-in", response_class=HTMLResponse)
async def sign_in(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Authenticate and create a session"""
    form = await request.form()
    email = str(form.get("email") or "").strip()
    password = str(form.get("password") or "")
    target = safe_redirect_target(str(form.get("redirect_url") or ""))

    auth_service = AuthService(db, session_duration_hours=settings.session_duration_hours)
    user = auth_service.authenticate(email, password) if email and password else None
    if not user:
        return render_template(
            "auth/sign_in.html",
            {"redirect_url": target, "email": email, "error": "Invalid email or password"},
            request,
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return _signed_in_redirect(user, auth_service, settings, target)


@router.get("/sign-up", response_class=HTMLResponse)
async def sign_up_page(request: Request, redirect_url: Optional[str] = None):
    """Registration page"""
    return render_template(
        "auth/sign_up.html",
        {"redirect_url": safe_redirect_target(redirect_url), "values": {}, "errors": {}, "error": None},
        request,
    )


@router.post("/sign-up", response_class=HTMLResponse)
async def sign_up(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Register a new user and sign them in"""
    form = await request.form()
    values = {field: str(form.get(field) or "") for field in SIGN_UP_MESSAGES}
    target = safe_redirect_target(str(form.get("redirect_url") or ""))
    shown_values = {k: v for k, v in values.items() if k != "password"}

    try:
        data = SignUpForm(**values)
    except PydanticValidationError as e:
        return render_template(
            "auth/sign_up.html",
            {"redirect_url": target, "values": shown_values, "errors": _sign_up_errors(e), "error": None},
            request,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    auth_service = AuthService(db, session_duration_hours=settings.session_duration_hours)
    try:
        user = auth_service.register_user(
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
        )
    except DuplicateEmailError:
        return render_template(
            "auth/sign_up.html",
            {
                "redirect_url": target,
                "values": shown_values,
                "errors": {},
                "error": "An account with this email already exists",
            },
            request,
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    return _signed_in_redirect(user, auth_service, settings, target)


@router.post("/sign-out")
async def sign_out(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Invalidate the session and clear the cookie"""
    token = extract_session_token(request, settings.session_cookie_name)
    if token:
        AuthService(db).logout(token)

    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(key=settings.session_cookie_name)
    return response
