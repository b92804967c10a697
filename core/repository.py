"""Small persistence helpers shared by the routers.

Wraps the add/commit/refresh and lookup-or-404 patterns that every router
would otherwise repeat.
"""

from typing import Any, Type, TypeVar

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from database.models import Base

T = TypeVar("T", bound=Base)


def save(session: Session, obj: T) -> T:
    """Add, commit and refresh an object.

    Args:
        session: Database session.
        obj: Model instance to persist.

    Returns:
        The persisted object with refreshed attributes.
    """
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj


def get_or_404(session: Session, model: Type[T], identifier: Any, resource: str = None) -> T:
    """Fetch a row by primary key or raise NotFoundError."""
    obj = session.get(model, identifier)
    if obj is None:
        raise NotFoundError(resource or model.__name__, identifier)
    return obj


def delete(session: Session, obj: Base) -> None:
    session.delete(obj)
    session.commit()
