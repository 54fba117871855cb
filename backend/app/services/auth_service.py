"""
Built-in identity provider: site accounts, password checks and session tokens
"""
import secrets
from datetime import timedelta
from typing import List, Optional
from uuid import UUID

import bcrypt
from sqlalchemy.orm import Session

from app.core.errors import DuplicateEmailError
from app.core.logging_config import LoggingConfig
from app.models.user import Session as UserSession
from app.models.user import User
from app.utils.datetime_utils import utc_now

logger = LoggingConfig.get_logger(__name__)

TOKEN_BYTES = 32
# bcrypt refuses longer secrets
MAX_PASSWORD_BYTES = 72


def normalize_email(email: str) -> str:
    return email.strip().lower()


def password_fits(password: str) -> bool:
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


class AuthService:
    """Accounts and cookie sessions for visitors of the protected pages"""

    def __init__(self, db: Session, session_duration_hours: int = 24):
        self.db = db
        self.session_duration_hours = session_duration_hours

    def _user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def _session_by_token(self, token: str) -> Optional[UserSession]:
        return self.db.query(UserSession).filter(UserSession.token == token).first()

    def register_user(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> User:
        """
        Create an account

        Emails are stored lowercased, so sign-in is case-insensitive.

        Raises:
            DuplicateEmailError: If an account with this email exists
            ValueError: If the password is longer than MAX_PASSWORD_BYTES
        """
        if not password_fits(password):
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        if self._user_by_email(email) is not None:
            raise DuplicateEmailError(normalize_email(email))

        user = User(
            email=normalize_email(email),
            first_name=first_name,
            last_name=last_name,
            password_hash=self._hash_password(password),
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info("Registered user", extra={"user_id": str(user.id)})
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the active user matching the credentials, or None"""
        user = self._user_by_email(email)
        if user is None or not user.is_active:
            logger.warning("Sign-in rejected: unknown or inactive account")
            return None
        if not self._verify_password(password, user.password_hash):
            logger.warning("Sign-in rejected: wrong password", extra={"user_id": str(user.id)})
            return None

        user.last_login = utc_now()
        self.db.commit()
        return user

    def create_session(self, user_id: UUID, duration_hours: Optional[int] = None) -> UserSession:
        """Issue a fresh random session token for the user"""
        lifetime = timedelta(hours=duration_hours or self.session_duration_hours)
        session = UserSession(
            user_id=user_id,
            token=secrets.token_urlsafe(TOKEN_BYTES),
            expires_at=utc_now() + lifetime,
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)

        logger.info("Session opened", extra={"user_id": str(user_id)})
        return session

    def validate_session(self, token: str) -> Optional[User]:
        """
        Look up the user behind a session token

        Expired sessions are deleted on sight. A valid lookup refreshes
        last_activity. Inactive users get None.
        """
        session = self._session_by_token(token)
        if session is None:
            return None

        now = utc_now()
        if session.expires_at < now:
            self.db.delete(session)
            self.db.commit()
            logger.info("Session expired", extra={"user_id": str(session.user_id)})
            return None

        session.last_activity = now
        self.db.commit()

        user = session.user
        return user if user is not None and user.is_active else None

    def logout(self, token: str) -> bool:
        """Delete the session; False when the token was unknown"""
        session = self._session_by_token(token)
        if session is None:
            return False

        self.db.delete(session)
        self.db.commit()
        logger.info("Session closed", extra={"user_id": str(session.user_id)})
        return True

    def purge_expired_sessions(self) -> int:
        """Remove every expired session; returns how many were removed"""
        removed = (
            self.db.query(UserSession)
            .filter(UserSession.expires_at < utc_now())
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return removed

    def list_users(self) -> List[User]:
        """All users, oldest first"""
        return self.db.query(User).order_by(User.created_at.asc()).all()

    @staticmethod
    def _hash_password(password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    @staticmethod
    def _verify_password(password: str, password_hash: str) -> bool:
        if not password_fits(password):
            return False
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
