"""
Tenant ownership guard

A record is visible to a caller only if its ``user_id`` is the caller's id.
Absent and foreign records produce the same NotFoundError so one tenant can
never learn whether another tenant's id exists.
"""

from typing import Any, Optional, Type, TypeVar
import uuid

from sqlmodel import Session, SQLModel, select
import structlog

from teachflow.core.context import Caller
from teachflow.core.errors import NotFoundError
from teachflow.models import ClassRecord, Contractor, Payment, Student

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)

LABELS = {
    Contractor: "Contractor",
    Student: "Student",
    ClassRecord: "Class",
    Payment: "Payment",
}


def coerce_id(value: Any) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def get_owned(
    session: Session,
    caller: Caller,
    model: Type[ModelT],
    entity_id: Any,
    message: Optional[str] = None,
    for_update: bool = False,
) -> ModelT:
    """Fetch ``model`` by id, scoped to the caller, or raise NotFoundError"""
    not_found = NotFoundError(message or f"{LABELS.get(model, model.__name__)} not found")

    entity_uuid = coerce_id(entity_id)
    if entity_uuid is None:
        raise not_found

    statement = select(model).where(model.id == entity_uuid, model.user_id == caller.id)
    if for_update:
        statement = statement.with_for_update()

    entity = session.exec(statement).first()
    if entity is None:
        logger.info(f"{model.__name__} {entity_uuid} not visible to user {caller.id}")
        raise not_found
    return entity
