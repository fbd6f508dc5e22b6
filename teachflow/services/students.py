"""
Student management
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlmodel import Session, col, select
import structlog

from teachflow.core.context import Caller
from teachflow.core.errors import ReferenceConflictError, ValidationFailure
from teachflow.models import ClassRecord, Contractor, Payment, Student, StudentStatus
from teachflow.schemas.student import StudentCreate, StudentUpdate
from teachflow.services.base import action, parse
from teachflow.services.ownership import coerce_id, get_owned

logger = structlog.get_logger(__name__)

RECENT_LIMIT = 10


@action("list students")
def list_students(
    session: Session,
    caller: Caller,
    status: Optional[StudentStatus] = None,
    contractor_id: Any = None,
    search: Optional[str] = None,
) -> List[Student]:
    statement = select(Student).where(Student.user_id == caller.id)

    if status is not None:
        try:
            statement = statement.where(Student.status == StudentStatus(status))
        except ValueError:
            raise ValidationFailure(f"Invalid student status: {status}")
    if contractor_id is not None:
        statement = statement.where(Student.contractor_id == coerce_id(contractor_id))
    if search:
        pattern = f"%{search.strip()}%"
        statement = statement.where(
            or_(col(Student.name).ilike(pattern), col(Student.email).ilike(pattern))
        )

    return list(session.exec(statement.order_by(Student.created_at.desc())).all())


@action("load student")
def get_student(session: Session, caller: Caller, student_id: Any) -> Dict[str, Any]:
    """Student with reference counts and the most recent classes and payments"""
    student = get_owned(session, caller, Student, student_id)

    class_count = session.exec(
        select(func.count()).select_from(ClassRecord)
        .where(ClassRecord.student_id == student.id, ClassRecord.user_id == caller.id)
    ).one()
    payment_count = session.exec(
        select(func.count()).select_from(Payment)
        .where(Payment.student_id == student.id, Payment.user_id == caller.id)
    ).one()
    recent_classes = session.exec(
        select(ClassRecord)
        .where(ClassRecord.student_id == student.id, ClassRecord.user_id == caller.id)
        .order_by(ClassRecord.start_time.desc())
        .limit(RECENT_LIMIT)
    ).all()
    recent_payments = session.exec(
        select(Payment)
        .where(Payment.student_id == student.id, Payment.user_id == caller.id)
        .order_by(Payment.created_at.desc())
        .limit(RECENT_LIMIT)
    ).all()

    return {
        **student.model_dump(),
        "class_count": class_count,
        "payment_count": payment_count,
        "recent_classes": list(recent_classes),
        "recent_payments": list(recent_payments),
    }


@action("create student")
def create_student(session: Session, caller: Caller, data: Any) -> Student:
    payload = parse(StudentCreate, data)
    if payload.contractor_id is not None:
        get_owned(session, caller, Contractor, payload.contractor_id)

    student = Student(user_id=caller.id, **_columns(payload.model_dump()))
    session.add(student)
    session.commit()
    session.refresh(student)

    logger.info(f"Student created: {student.id}")
    return student


@action("update student")
def update_student(session: Session, caller: Caller, student_id: Any, data: Any) -> Student:
    """Partial update; an explicit null contractor makes the student private"""
    payload = parse(StudentUpdate, data)
    student = get_owned(session, caller, Student, student_id)

    changes = payload.model_dump(exclude_unset=True)
    if payload.package_details is not None:
        # A replaced package is stored whole, defaults included
        changes["package_details"] = payload.package_details.model_dump()
    changes = _columns(changes)
    if changes.get("contractor_id") is not None:
        get_owned(session, caller, Contractor, changes["contractor_id"])

    for key, value in changes.items():
        setattr(student, key, value)

    student.updated_at = datetime.utcnow()
    session.add(student)
    session.commit()
    session.refresh(student)

    logger.info(f"Student updated: {student.id}")
    return student


@action("delete student")
def delete_student(session: Session, caller: Caller, student_id: Any) -> None:
    student = get_owned(session, caller, Student, student_id)

    for label, model in (("classes", ClassRecord), ("payments", Payment)):
        linked = session.exec(
            select(func.count()).select_from(model)
            .where(model.student_id == student.id, model.user_id == caller.id)
        ).one()
        if linked:
            raise ReferenceConflictError(
                f"Failed to delete student. Make sure the student has no associated data ({linked} {label}).",
                detail={label: linked},
            )

    session.delete(student)
    session.commit()
    logger.info(f"Student deleted: {student.id}")


def _columns(values: Dict[str, Any]) -> Dict[str, Any]:
    if values.get("package_details") is not None:
        package = values["package_details"]
        values["package_details"] = {
            **package,
            "value_per_package": str(package["value_per_package"]),
            "expires_at": package["expires_at"].isoformat() if package.get("expires_at") else None,
        }
    return values
