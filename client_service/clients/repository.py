"""
Client Repository - persistence adapter over the client record store.

Uniqueness of email and phone is enforced by the store's constraints; the
repository translates constraint violations into client exceptions.
"""
from typing import Any, Dict, List, Optional
from sqlalchemy import or_, asc, desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from .models import Client
from .schemas import ClientListFilters
from .exceptions import ClientCreationException, DuplicateClientException, ValidationException

# Set up logging
logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "name": Client.name,
    "email": Client.email,
    "age": Client.age,
    "gender": Client.gender,
    "verified": Client.verified,
    "created_at": Client.created_at,
    "updated_at": Client.updated_at,
}

class ClientRepository:
    """
    Generic create/find/update operations against the clients table.

    Args:
        db: Request-scoped database session
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, **fields: Any) -> Client:
        """
        Insert a new client.

        Raises:
            ClientCreationException: If the store rejects the insert for any reason
        """
        client = Client(**fields)
        self.db.add(client)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error during client creation: {str(e)}")
            raise ClientCreationException() from e
        self.db.refresh(client)
        return client

    def find_one(self, *criteria) -> Optional[Client]:
        return self.db.query(Client).filter(*criteria).first()

    def find_by_id(self, client_id: int) -> Optional[Client]:
        return self.db.get(Client, client_id)

    def find_by_email(self, email: str) -> Optional[Client]:
        return self.find_one(Client.email == email)

    def find_by_email_or_phone(self, email: str, phone: str, exclude_id: Optional[int] = None) -> Optional[Client]:
        """Find a client already holding ``email`` or ``phone``, optionally ignoring one id."""
        criteria = [or_(Client.email == email, Client.phone == phone)]
        if exclude_id is not None:
            criteria.append(Client.id != exclude_id)
        return self.find_one(*criteria)

    def save(self, client: Client) -> Client:
        """
        Persist pending changes on ``client``.

        Raises:
            DuplicateClientException: If the change collides with another client's email or phone
        """
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Unique constraint violated while saving client {client.id}: {str(e.orig)}")
            raise DuplicateClientException("Email or phone already in use") from e
        self.db.refresh(client)
        return client

    def find_by_id_and_update(self, client_id: int, patch: Dict[str, Any]) -> Optional[Client]:
        """Apply ``patch`` to the client with ``client_id``; None when it does not exist."""
        client = self.find_by_id(client_id)
        if not client:
            return None
        for field, value in patch.items():
            setattr(client, field, value)
        return self.save(client)

    def count(self, *criteria) -> int:
        return self.db.query(Client).filter(*criteria).count()

    def find(self, *criteria, order_by=None, skip: int = 0, limit: Optional[int] = None) -> List[Client]:
        query = self.db.query(Client).filter(*criteria)
        if order_by is not None:
            query = query.order_by(order_by, Client.id)
        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def compare_and_set_refresh_token(self, client_id: int, expected: str, new: Optional[str]) -> bool:
        """
        Replace the stored refresh token only if it still equals ``expected``.

        Returns:
            bool: True if exactly one row was updated
        """
        updated = (
            self.db.query(Client)
            .filter(Client.id == client_id, Client.refresh_token == expected)
            .update({Client.refresh_token: new}, synchronize_session="fetch")
        )
        self.db.commit()
        return updated == 1


def filter_criteria(filters: ClientListFilters) -> list:
    """Translate listing filters into SQLAlchemy criteria."""
    criteria = []
    if filters.verified is not None:
        criteria.append(Client.verified == filters.verified)
    if filters.gender is not None:
        criteria.append(Client.gender == filters.gender)
    return criteria


def sort_clause(filters: ClientListFilters):
    """
    Build the ORDER BY clause for listing.

    Raises:
        ValidationException: If ``sort_by`` names a column that cannot be sorted on
    """
    column = SORTABLE_FIELDS.get(filters.sort_by)
    if column is None:
        raise ValidationException(f"Cannot sort by '{filters.sort_by}'")
    return asc(column) if filters.sort_order == "asc" else desc(column)
