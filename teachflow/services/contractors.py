"""
Contractor management
"""

from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import func
from sqlmodel import Session, select
import structlog

from teachflow.core.context import Caller
from teachflow.core.errors import ReferenceConflictError
from teachflow.models import ClassRecord, Contractor, Payment, Student
from teachflow.schemas.contractor import ContractorCreate, ContractorUpdate
from teachflow.services.base import action, parse
from teachflow.services.ownership import get_owned

logger = structlog.get_logger(__name__)


def count_references(session: Session, contractor: Contractor) -> Dict[str, int]:
    """Students, classes and payments pointing at a contractor"""
    counts = {}
    for key, model in (("students", Student), ("classes", ClassRecord), ("payments", Payment)):
        counts[key] = session.exec(
            select(func.count())
            .select_from(model)
            .where(model.contractor_id == contractor.id, model.user_id == contractor.user_id)
        ).one()
    return counts


@action("list contractors")
def list_contractors(session: Session, caller: Caller) -> List[Contractor]:
    return list(session.exec(
        select(Contractor)
        .where(Contractor.user_id == caller.id)
        .order_by(Contractor.created_at.desc())
    ).all())


@action("load contractor")
def get_contractor(session: Session, caller: Caller, contractor_id: Any) -> Dict[str, Any]:
    """Contractor fields plus how many records reference it"""
    contractor = get_owned(session, caller, Contractor, contractor_id)
    counts = count_references(session, contractor)
    return {
        **contractor.model_dump(),
        "student_count": counts["students"],
        "class_count": counts["classes"],
        "payment_count": counts["payments"],
    }


@action("create contractor")
def create_contractor(session: Session, caller: Caller, data: Any) -> Contractor:
    payload = parse(ContractorCreate, data)

    contractor = Contractor(user_id=caller.id, **_columns(payload.model_dump()))
    session.add(contractor)
    session.commit()
    session.refresh(contractor)

    logger.info(f"Contractor created: {contractor.id}")
    return contractor


@action("update contractor")
def update_contractor(session: Session, caller: Caller, contractor_id: Any, data: Any) -> Contractor:
    payload = parse(ContractorUpdate, data)
    contractor = get_owned(session, caller, Contractor, contractor_id)

    for key, value in _columns(payload.model_dump(exclude_unset=True)).items():
        setattr(contractor, key, value)

    contractor.updated_at = datetime.utcnow()
    session.add(contractor)
    session.commit()
    session.refresh(contractor)

    logger.info(f"Contractor updated: {contractor.id}")
    return contractor


@action("delete contractor")
def delete_contractor(session: Session, caller: Caller, contractor_id: Any) -> None:
    """Remove a contractor nothing references; never cascades"""
    contractor = get_owned(session, caller, Contractor, contractor_id)

    counts = count_references(session, contractor)
    in_use = {key: value for key, value in counts.items() if value}
    if in_use:
        listed = ", ".join(f"{value} {key}" for key, value in in_use.items())
        raise ReferenceConflictError(
            f"Failed to delete contractor. It still has associated data ({listed}).",
            detail=in_use,
        )

    session.delete(contractor)
    session.commit()
    logger.info(f"Contractor deleted: {contractor.id}")


def _columns(values: Dict[str, Any]) -> Dict[str, Any]:
    # JSON column needs plain data
    if values.get("contact_info") is not None:
        values["contact_info"] = {k: v for k, v in values["contact_info"].items() if v}
    return values
