"""
SQLAlchemy models
"""
from app.core.database import Base
from app.models.contact import Contact  # noqa: F401
from app.models.user import Session, User  # noqa: F401

__all__ = [
    "Base",
    "Contact",
    "Session",
    "User",
]
