"""
Admin-only user directory API
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.auth import SessionIdentity, get_optional_session
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import UpstreamError
from app.core.logging_config import LoggingConfig
from app.services.user_directory import UserDirectory, build_user_directory

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


class DirectoryUserResponse(BaseModel):
    """Directory entry as exposed to the admin"""
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None


class UserListResponse(BaseModel):
    """User list response model"""
    users: List[DirectoryUserResponse] = Field(default_factory=list)


def get_user_directory(
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> UserDirectory:
    """Dependency providing the configured directory backend"""
    return build_user_directory(settings, db)


def is_admin(identity: Optional[SessionIdentity], settings: Settings) -> bool:
    return bool(
        identity is not None
        and settings.admin_user_id
        and identity.user_id == settings.admin_user_id
    )


@router.get("", response_model=UserListResponse)
async def list_users(
    identity: Optional[SessionIdentity] = Depends(get_optional_session),
    settings: Settings = Depends(get_settings),
    directory: UserDirectory = Depends(get_user_directory),
):
    """First name, last name and email of every user; admin only"""
    if not is_admin(identity, settings):
        logger.warning(
            "Rejected user directory request",
            extra={"user_id": identity.user_id if identity else None},
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized. Only admin can access this endpoint."
        )

    try:
        users = await directory.list_users()
    except UpstreamError as e:
        logger.error(f"Error fetching users: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch users"
        )

    return UserListResponse(users=[DirectoryUserResponse(**u.to_public()) for u in users])
