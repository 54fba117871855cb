"""
Session resolution and the access guard for protected pages
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import AuthorizationError
from app.core.logging_config import LoggingConfig
from app.services.auth_service import AuthService

logger = LoggingConfig.get_logger(__name__)


@dataclass(frozen=True)
class SessionIdentity:
    """Opaque identity of a signed-in caller"""
    user_id: str
    email: Optional[str] = None


class SessionResolver(ABC):
    """Resolves the caller's session with the identity provider"""

    @abstractmethod
    def resolve(self, request: Request) -> Optional[SessionIdentity]:
        """Return the session identity, or None when there is no valid session"""


def extract_session_token(request: Request, cookie_name: str) -> Optional[str]:
    """Token from the Authorization header, falling back to the session cookie"""
    authorization = request.headers.get("authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return request.cookies.get(cookie_name) or None


class DatabaseSessionResolver(SessionResolver):
    """Validates session tokens issued by AuthService"""

    def __init__(self, auth_service: AuthService, cookie_name: str = "session_token"):
        self.auth_service = auth_service
        self.cookie_name = cookie_name

    def resolve(self, request: Request) -> Optional[SessionIdentity]:
        token = extract_session_token(request, self.cookie_name)
        # No token, no DB query
        if not token:
            return None

        user = self.auth_service.validate_session(token)
        if not user:
            return None
        return SessionIdentity(user_id=str(user.id), email=user.email)


@dataclass(frozen=True)
class GuardDecision:
    """Outcome of one guard check: Authorized (identity set) or Redirected (redirect_url set)"""
    identity: Optional[SessionIdentity] = None
    redirect_url: Optional[str] = None

    @property
    def authorized(self) -> bool:
        return self.identity is not None


def safe_redirect_target(target: Optional[str], default: str = "/") -> str:
    """Only same-site relative paths are allowed as post sign-in destinations"""
    if not target or not target.startswith("/") or target.startswith("//") or "\\" in target:
        return default
    return target


def build_sign_in_url(sign_in_path: str, return_to: str) -> str:
    return f"{sign_in_path}?{urlencode({'redirect_url': return_to})}"


class AccessGuard:
    """
    Coarse binary gate in front of protected pages.

    Per request: Unauthenticated -> (session check) -> Authorized | Redirected.
    Any authenticated session is authorized; there are no roles.
    """

    def __init__(self, resolver: SessionResolver, sign_in_path: str = "/sign-in"):
        self.resolver = resolver
        self.sign_in_path = sign_in_path

    def check(self, request: Request) -> GuardDecision:
        try:
            identity = self.resolver.resolve(request)
        except Exception as e:
            # Resolver failures count as "no session"
            logger.warning(f"Failed to resolve session (treated as anonymous): {e}")
            identity = None

        if identity is not None:
            return GuardDecision(identity=identity)

        return_to = request.url.path
        if request.url.query:
            return_to = f"{return_to}?{request.url.query}"
        return GuardDecision(redirect_url=build_sign_in_url(self.sign_in_path, return_to))


def get_session_resolver(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SessionResolver:
    """Dependency providing the session resolver; override in tests"""
    auth_service = AuthService(db, session_duration_hours=settings.session_duration_hours)
    return DatabaseSessionResolver(auth_service, cookie_name=settings.session_cookie_name)


def get_optional_session(
    request: Request,
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Optional[SessionIdentity]:
    """Session identity if signed in, otherwise None (never redirects)"""
    try:
        return resolver.resolve(request)
    except Exception as e:
        logger.warning(f"Failed to resolve session (treated as anonymous): {e}")
        return None


def require_session(
    request: Request,
    resolver: SessionResolver = Depends(get_session_resolver),
    settings: Settings = Depends(get_settings),
) -> SessionIdentity:
    """
    Guard dependency for protected pages

    Declare it first on a route so nothing else runs for anonymous callers.

    Raises:
        AuthorizationError: Carries the sign-in URL; the app turns it into a redirect
    """
    decision = AccessGuard(resolver, sign_in_path=settings.sign_in_path).check(request)
    if not decision.authorized:
        logger.info("Redirecting anonymous request to sign-in", extra={"path": request.url.path})
        raise AuthorizationError(decision.redirect_url)
    return decision.identity
