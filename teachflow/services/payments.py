"""
Payments ledger operations
"""

from datetime import date, datetime
from typing import Any, List, Optional

from sqlmodel import Session, select
import structlog

from teachflow.core.context import Caller
from teachflow.core.errors import ValidationFailure
from teachflow.models import Contractor, Payment, PaymentStatus, Student
from teachflow.schemas.payment import PaymentCreate
from teachflow.services.base import action, parse
from teachflow.services.ownership import coerce_id, get_owned
from teachflow.services.periods import PeriodPreset, resolve_period, to_utc_naive

logger = structlog.get_logger(__name__)


@action("list payments")
def list_payments(
    session: Session,
    caller: Caller,
    status: Optional[PaymentStatus] = None,
    contractor_id: Any = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    period: Optional[PeriodPreset] = None,
) -> List[Payment]:
    """Caller's payments, latest due date first

    ``period`` fills in whichever of ``start_date``/``end_date`` was not
    given explicitly.
    """
    if period is not None:
        period_start, period_end = resolve_period(period, caller)
        start_date = start_date or period_start
        end_date = end_date or period_end

    statement = select(Payment).where(Payment.user_id == caller.id)
    if status is not None:
        statement = statement.where(Payment.status == _parse_status(status))
    if contractor_id is not None:
        statement = statement.where(Payment.contractor_id == coerce_id(contractor_id))
    if start_date is not None:
        statement = statement.where(Payment.due_date >= start_date)
    if end_date is not None:
        statement = statement.where(Payment.due_date <= end_date)

    return list(session.exec(statement.order_by(Payment.due_date.desc())).all())


@action("load payment")
def get_payment(session: Session, caller: Caller, payment_id: Any) -> Payment:
    return get_owned(session, caller, Payment, payment_id)


@action("create payment")
def create_payment(session: Session, caller: Caller, data: Any) -> Payment:
    """Record a payment that did not come from a completed class"""
    payload = parse(PaymentCreate, data)

    student = get_owned(session, caller, Student, payload.student_id)
    contractor = get_owned(session, caller, Contractor, payload.contractor_id)

    payment = Payment(
        user_id=caller.id,
        class_id=None,
        student_id=student.id,
        contractor_id=contractor.id,
        amount=payload.amount,
        currency=payload.currency or contractor.currency,
        status=PaymentStatus.PENDING,
        due_date=payload.due_date,
        notes=payload.notes,
    )
    session.add(payment)
    session.commit()
    session.refresh(payment)

    logger.info(f"Payment created: {payment.id}")
    return payment


@action("update payment")
def update_payment_status(
    session: Session,
    caller: Caller,
    payment_id: Any,
    status: PaymentStatus | str,
    received_date: Optional[datetime] = None,
) -> Payment:
    """Change a payment's status; the amount is never recomputed

    ``received`` stamps the received date (now unless given); any other
    status clears it.
    """
    new_status = _parse_status(status)
    payment = get_owned(session, caller, Payment, payment_id)

    payment.status = new_status
    if new_status == PaymentStatus.RECEIVED:
        payment.received_date = to_utc_naive(received_date) if received_date else datetime.utcnow()
    else:
        payment.received_date = None

    payment.updated_at = datetime.utcnow()
    session.add(payment)
    session.commit()
    session.refresh(payment)

    logger.info(f"Payment {payment.id} status set to {new_status.value}")
    return payment


def _parse_status(status: PaymentStatus | str) -> PaymentStatus:
    try:
        return PaymentStatus(status)
    except ValueError:
        raise ValidationFailure(f"Invalid payment status: {status}")
