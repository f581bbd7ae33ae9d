"""Idempotent write helpers for a store without multi-statement transactions.

Every "check, then insert" sequence in the services goes through
``insert_if_absent``. The existence check and the insert are separate atomic
statements, so two callers can race; the loser hits the unique constraint,
rolls back its savepoint and converges on the row that won.
"""
import logging
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def find_first(session: Session, model: Type[ModelT], **lookup: Any) -> Optional[ModelT]:
    """Return the oldest row matching ``lookup`` (lowest primary key), if any."""
    stmt = select(model).filter_by(**lookup).order_by(model.id).limit(1)
    return session.execute(stmt).scalars().first()


def insert_if_absent(
    session: Session,
    model: Type[ModelT],
    lookup: Dict[str, Any],
    defaults: Optional[Dict[str, Any]] = None,
) -> Tuple[ModelT, bool]:
    """Insert a row keyed by ``lookup`` unless one already exists.

    Returns ``(row, created)``. ``created`` is False both when the row was
    found up front and when a concurrent insert won the race.
    """
    existing = find_first(session, model, **lookup)
    if existing is not None:
        return existing, False

    row = model(**lookup, **(defaults or {}))
    try:
        with session.begin_nested():
            session.add(row)
    except IntegrityError:
        logger.info(
            f"Concurrent insert detected for {model.__name__}, using existing row",
            extra={"lookup": {k: str(v) for k, v in lookup.items()}},
        )
        existing = find_first(session, model, **lookup)
        if existing is None:
            raise
        return existing, False
    return row, True
