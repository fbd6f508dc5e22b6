"""
Dashboard aggregates
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import and_, func, or_
from sqlmodel import Session, col, select

from teachflow.core.context import Caller
from teachflow.core.errors import ValidationFailure
from teachflow.models import ClassRecord, ClassStatus, Payment, PaymentStatus, Student, StudentStatus
from teachflow.schemas.dashboard import ContractorTotal, DashboardOverview, FinancialSummary
from teachflow.services.base import action
from teachflow.services.periods import day_range_utc, local_today, month_range

ZERO = Decimal("0.00")


def _decimal(value: Any) -> Decimal:
    if value is None:
        return ZERO
    return Decimal(str(value))


def _received_total(session: Session, caller: Caller, lower: datetime, upper: datetime) -> Decimal:
    return _decimal(session.exec(
        select(func.sum(Payment.amount)).where(
            Payment.user_id == caller.id,
            Payment.status == PaymentStatus.RECEIVED,
            Payment.received_date >= lower,
            Payment.received_date < upper,
        )
    ).one())


@action("load financial summary")
def get_financial_summary(
    session: Session,
    caller: Caller,
    start: date,
    end: date,
    today: Optional[date] = None,
) -> FinancialSummary:
    """Money received in [start, end] and money past due as of today

    Past due covers pending payments whose due date has arrived and payments
    already flagged overdue.
    """
    if end < start:
        raise ValidationFailure("end must not be before start")
    today = today or local_today(caller)
    lower, upper = day_range_utc(caller, start, end)

    pending = session.exec(
        select(func.sum(Payment.amount)).where(
            Payment.user_id == caller.id,
            or_(
                Payment.status == PaymentStatus.OVERDUE,
                and_(Payment.status == PaymentStatus.PENDING, Payment.due_date <= today),
            ),
        )
    ).one()

    rows = session.exec(
        select(Payment.contractor_id, func.sum(Payment.amount))
        .where(
            Payment.user_id == caller.id,
            Payment.status == PaymentStatus.RECEIVED,
            Payment.received_date >= lower,
            Payment.received_date < upper,
        )
        .group_by(Payment.contractor_id)
    ).all()

    return FinancialSummary(
        total_received=_received_total(session, caller, lower, upper),
        total_pending=_decimal(pending),
        by_contractor=[
            ContractorTotal(contractor_id=contractor_id, total=_decimal(total))
            for contractor_id, total in rows
        ],
    )


@action("load dashboard")
def get_overview(session: Session, caller: Caller, today: Optional[date] = None) -> DashboardOverview:
    """Classes scheduled today, active students and this month's revenue"""
    today = today or local_today(caller)
    day_start, day_end = day_range_utc(caller, today, today)

    classes_today = session.exec(
        select(func.count()).select_from(ClassRecord).where(
            ClassRecord.user_id == caller.id,
            ClassRecord.status == ClassStatus.SCHEDULED,
            col(ClassRecord.start_time) >= day_start,
            col(ClassRecord.start_time) < day_end,
        )
    ).one()

    active_students = session.exec(
        select(func.count()).select_from(Student).where(
            Student.user_id == caller.id,
            Student.status == StudentStatus.ACTIVE,
        )
    ).one()

    month_start, month_end = month_range(today)
    lower, upper = day_range_utc(caller, month_start, month_end)

    return DashboardOverview(
        classes_today=classes_today,
        active_students=active_students,
        month_revenue=_received_total(session, caller, lower, upper),
        currency=caller.currency,
    )
