"""
User directory backends for the admin user listing
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import UpstreamError
from app.core.logging_config import LoggingConfig
from app.services.auth_service import AuthService

logger = LoggingConfig.get_logger(__name__)


class DirectoryUser(BaseModel):
    """Public projection of a directory entry"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    def to_public(self) -> Dict[str, Optional[str]]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
        }


class UserDirectory(ABC):
    """Source of the user list"""

    @abstractmethod
    async def list_users(self) -> List[DirectoryUser]:
        """
        Raises:
            UpstreamError: If the directory cannot be read
        """


class LocalUserDirectory(UserDirectory):
    """Reads users registered with the built-in identity provider"""

    def __init__(self, db: Session):
        self.db = db

    async def list_users(self) -> List[DirectoryUser]:
        try:
            users = AuthService(self.db).list_users()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read local user directory: {e}", exc_info=True)
            raise UpstreamError("User directory unavailable") from e

        return [
            DirectoryUser(first_name=u.first_name, last_name=u.last_name, email=u.email)
            for u in users
        ]


class HostedUserDirectory(UserDirectory):
    """
    Reads users from a hosted identity provider's REST API

    Expects ``GET {base_url}/v1/users`` to return a JSON array of users with
    ``first_name``, ``last_name`` and ``email_addresses[].email_address``.
    """

    def __init__(
        self,
        base_url: str,
        secret_key: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.secret_key = secret_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.secret_key:
            headers["Authorization"] = f"Bearer {self.secret_key}"
        return headers

    async def list_users(self) -> List[DirectoryUser]:
        url = f"{self.base_url}/v1/users"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, headers=self._headers())
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"User directory returned HTTP {e.response.status_code}")
            raise UpstreamError(f"User directory returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"User directory request failed: {type(e).__name__}: {e}")
            raise UpstreamError("User directory request failed") from e
        except ValueError as e:
            logger.error("User directory returned malformed JSON")
            raise UpstreamError("User directory returned malformed JSON") from e

        if not isinstance(payload, list):
            raise UpstreamError("User directory returned an unexpected payload")

        return [self._to_directory_user(item) for item in payload if isinstance(item, dict)]

    @staticmethod
    def _to_directory_user(item: Dict[str, Any]) -> DirectoryUser:
        addresses = item.get("email_addresses") or []
        email = None
        if addresses and isinstance(addresses[0], dict):
            email = addresses[0].get("email_address")
        return DirectoryUser(
            first_name=item.get("first_name"),
            last_name=item.get("last_name"),
            email=email,
        )


def build_user_directory(settings: Settings, db: Session) -> UserDirectory:
    """Hosted directory when a URL is configured, local users table otherwise"""
    if settings.identity_directory_url:
        return HostedUserDirectory(
            base_url=settings.identity_directory_url,
            secret_key=settings.identity_secret_key,
            timeout=settings.identity_timeout_seconds,
        )
    return LocalUserDirectory(db)
