"""
Class lifecycle and billing trigger

Classes start as ``scheduled``. Moving one to ``completed`` derives exactly
one pending Payment from the contractor's billing rules in the same
transaction as the status change. ``cancelled`` and ``no_show`` have no
billing side effect.
"""

from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
import structlog

from teachflow.core.context import Caller
from teachflow.core.errors import NotFoundError, ReferenceConflictError, ValidationFailure
from teachflow.models import ClassRecord, ClassStatus, Contractor, Payment, PaymentStatus, Student
from teachflow.schemas.class_record import ClassCreate
from teachflow.services.base import ActionResult, action, parse
from teachflow.services.ownership import coerce_id, get_owned
from teachflow.services.periods import day_range_utc, local_today, to_utc_naive

logger = structlog.get_logger(__name__)

REFERENCE_NOT_FOUND = "Student or Contractor not found"
CONTRACTOR_MISSING_WARNING = (
    "Class marked as completed, but no payment was created because its "
    "contractor could not be found"
)


@action("list classes")
def list_classes(
    session: Session,
    caller: Caller,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    student_id: Any = None,
    contractor_id: Any = None,
    status: Optional[ClassStatus] = None,
) -> List[ClassRecord]:
    """Caller's classes ordered by start time, optionally filtered"""
    statement = select(ClassRecord).where(ClassRecord.user_id == caller.id)

    if student_id is not None:
        statement = statement.where(ClassRecord.student_id == coerce_id(student_id))
    if contractor_id is not None:
        statement = statement.where(ClassRecord.contractor_id == coerce_id(contractor_id))
    if status is not None:
        statement = statement.where(ClassRecord.status == _parse_status(status))
    if start_date is not None:
        lower, _ = day_range_utc(caller, start_date, start_date)
        statement = statement.where(ClassRecord.start_time >= lower)
    if end_date is not None:
        _, upper = day_range_utc(caller, end_date, end_date)
        statement = statement.where(ClassRecord.start_time < upper)

    return list(session.exec(statement.order_by(ClassRecord.start_time)).all())


@action("load class")
def get_class(session: Session, caller: Caller, class_id: Any) -> ClassRecord:
    return get_owned(session, caller, ClassRecord, class_id)


@action("create class")
def create_class(session: Session, caller: Caller, data: Any) -> ClassRecord:
    """Schedule a class for one of the caller's students and contractors

    Both references are verified separately; either failing yields the same
    generic error and nothing is written.
    """
    payload = parse(ClassCreate, data)

    get_owned(session, caller, Student, payload.student_id, message=REFERENCE_NOT_FOUND)
    get_owned(session, caller, Contractor, payload.contractor_id, message=REFERENCE_NOT_FOUND)

    start_time = to_utc_naive(payload.start_time)
    class_record = ClassRecord(
        user_id=caller.id,
        student_id=payload.student_id,
        contractor_id=payload.contractor_id,
        start_time=start_time,
        duration_minutes=payload.duration_minutes,
        end_time=ClassRecord.compute_end_time(start_time, payload.duration_minutes),
        status=ClassStatus.SCHEDULED,
        location_type=payload.location_type,
        virtual_meeting_link=payload.virtual_meeting_link,
        custom_rate=payload.custom_rate,
        class_notes=payload.class_notes,
    )

    session.add(class_record)
    session.commit()
    session.refresh(class_record)

    logger.info(f"Class created: {class_record.id}")
    return class_record


@action("update class")
def update_class_status(
    session: Session,
    caller: Caller,
    class_id: Any,
    status: ClassStatus | str,
    notes: Optional[str] = None,
    completed_on: Optional[date] = None,
) -> ActionResult:
    """Set a class's status (and notes), billing it when it becomes completed

    ``completed_on`` defaults to today in the caller's timezone and anchors
    the payment due date. Notes are left untouched when ``notes`` is None.
    The result's ``extras["payment"]`` holds the class's payment, if any.
    """
    new_status = _parse_status(status)
    completed_on = completed_on or local_today(caller)

    try:
        class_record, payment, warnings = _apply_status(
            session, caller, class_id, new_status, notes, completed_on
        )
    except IntegrityError:
        # A concurrent completion inserted the payment first; our
        # status change was rolled back with it, so apply it again.
        session.rollback()
        logger.info(f"Concurrent completion detected for class {class_id}, retrying")
        class_record, payment, warnings = _apply_status(
            session, caller, class_id, new_status, notes, completed_on
        )

    logger.info(f"Class {class_record.id} status set to {new_status.value}")
    return ActionResult.ok(class_record, warnings=warnings, payment=payment)


@action("delete class")
def delete_class(session: Session, caller: Caller, class_id: Any) -> None:
    class_record = get_owned(session, caller, ClassRecord, class_id)

    payment = _payment_for_class(session, class_record)
    if payment is not None:
        raise ReferenceConflictError(
            "Failed to delete class. It already has a payment; cancel the payment instead.",
            detail={"payment_id": str(payment.id)},
        )

    session.delete(class_record)
    session.commit()
    logger.info(f"Class deleted: {class_record.id}")


def _parse_status(status: ClassStatus | str) -> ClassStatus:
    try:
        return ClassStatus(status)
    except ValueError:
        raise ValidationFailure(f"Invalid class status: {status}")


def _apply_status(
    session: Session,
    caller: Caller,
    class_id: Any,
    new_status: ClassStatus,
    notes: Optional[str],
    completed_on: date,
) -> Tuple[ClassRecord, Optional[Payment], List[str]]:
    """Status write, payment check and payment insert as one transaction"""
    # Row lock serializes concurrent completions of the same class
    class_record = get_owned(session, caller, ClassRecord, class_id, for_update=True)

    class_record.status = new_status
    if notes is not None:
        class_record.class_notes = notes
    class_record.updated_at = datetime.utcnow()
    session.add(class_record)

    payment = None
    warnings: List[str] = []
    if new_status == ClassStatus.COMPLETED:
        payment = _derive_payment(session, caller, class_record, completed_on)
        if payment is None:
            warnings.append(CONTRACTOR_MISSING_WARNING)
    else:
        payment = _payment_for_class(session, class_record)

    session.commit()
    session.refresh(class_record)
    if payment is not None:
        session.refresh(payment)
    return class_record, payment, warnings


def _payment_for_class(session: Session, class_record: ClassRecord) -> Optional[Payment]:
    return session.exec(
        select(Payment).where(Payment.class_id == class_record.id)
    ).first()


def _derive_payment(
    session: Session,
    caller: Caller,
    class_record: ClassRecord,
    completed_on: date,
) -> Optional[Payment]:
    """Return the class's payment, creating it on first completion

    Returns None when the contractor can no longer be verified as the
    caller's; the class is still completed in that case.
    """
    existing = _payment_for_class(session, class_record)
    if existing is not None:
        logger.info(f"Payment {existing.id} already exists for class {class_record.id}")
        return existing

    # Never trust the stored reference alone
    try:
        contractor = get_owned(session, caller, Contractor, class_record.contractor_id)
    except NotFoundError:
        logger.warning(
            f"Skipping payment for class {class_record.id}: "
            f"contractor {class_record.contractor_id} not found for user {caller.id}"
        )
        return None

    payment = Payment(
        user_id=caller.id,
        class_id=class_record.id,
        student_id=class_record.student_id,
        contractor_id=class_record.contractor_id,
        amount=class_record.billing_rate(contractor.default_hourly_rate),
        currency=contractor.currency,
        status=PaymentStatus.PENDING,
        due_date=completed_on + timedelta(days=contractor.payment_terms_days),
    )
    session.add(payment)
    # Surface a unique-constraint race before the commit
    session.flush()

    logger.info(
        f"Payment {payment.id} created for class {class_record.id}: "
        f"{payment.amount} {payment.currency} due {payment.due_date}"
    )
    return payment
