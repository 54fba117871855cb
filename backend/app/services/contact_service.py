"""
Contact submission storage: the single write path and the listing read path
"""
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import PersistenceError
from app.core.logging_config import LoggingConfig
from app.models.contact import Contact

logger = LoggingConfig.get_logger(__name__)


class ContactService:
    """Service for persisting and listing contact submissions"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, name: str, email: str, message: str) -> Contact:
        """
        Persist a validated submission

        Values are expected to have passed validate_submission already.
        id and created_at are assigned by the model defaults.

        Args:
            name: Sender name
            email: Sender email address
            message: Message body

        Returns:
            The stored Contact row

        Raises:
            PersistenceError: If the store is unreachable or rejects the insert
        """
        contact = Contact(name=name, email=email, message=message)
        try:
            self.db.add(contact)
            self.db.commit()
            self.db.refresh(contact)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Failed to store contact submission",
                exc_info=True,
                extra={"error_type": type(e).__name__},
            )
            raise PersistenceError("Could not store contact submission") from e

        logger.info("Stored contact submission", extra={"contact_id": str(contact.id)})
        return contact

    def list_all(self, limit: Optional[int] = None) -> List[Contact]:
        """
        All submissions, most recent first

        Rows sharing a created_at come back in reverse insertion order (id is
        an autoincrementing key). limit caps the result for the CLI; the
        listing page always reads the whole table.

        Raises:
            PersistenceError: If the store cannot be read
        """
        try:
            query = self.db.query(Contact).order_by(Contact.created_at.desc(), Contact.id.desc())
            if limit:
                query = query.limit(limit)
            return query.all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Failed to list contact submissions",
                exc_info=True,
                extra={"error_type": type(e).__name__},
            )
            raise PersistenceError("Could not read contact submissions") from e

    def count(self) -> int:
        """Number of stored submissions"""
        try:
            return self.db.query(Contact).count()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Could not count contact submissions") from e
