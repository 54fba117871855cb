"""
Contact form submission model
"""
from sqlalchemy import Column, DateTime, Integer, String, Text

from app.core.database import Base
from app.utils.datetime_utils import utc_now_callable


class Contact(Base):
    """One durable contact-form inquiry. Rows are inserted once and never updated."""
    __tablename__ = "contacts"

    # Also the insertion order: ties on created_at sort by it
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False)
    message = Column(Text, nullable=False)
    # Assigned at insert time; callers never supply it
    created_at = Column(DateTime, default=utc_now_callable(), nullable=False, index=True)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Contact(id={self.id}, email={self.email}, created_at={self.created_at})>"
