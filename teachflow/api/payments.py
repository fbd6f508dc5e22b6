"""
Payments API endpoints
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session
from datetime import date
from typing import List, Optional
import uuid

from teachflow.api.responses import unwrap
from teachflow.core.context import Caller
from teachflow.core.database import get_session
from teachflow.core.dependencies import get_current_caller
from teachflow.models import PaymentStatus
from teachflow.schemas.payment import PaymentCreate, PaymentRead, PaymentStatusUpdate
from teachflow.services import payments
from teachflow.services.periods import PeriodPreset

router = APIRouter()


@router.get("/", response_model=List[PaymentRead])
def list_payments(
    status_filter: Optional[PaymentStatus] = Query(default=None, alias="status"),
    contractor_id: Optional[uuid.UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    period: Optional[PeriodPreset] = None,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    """List payments by due date, newest first"""
    return unwrap(payments.list_payments(
        session,
        caller,
        status=status_filter,
        contractor_id=contractor_id,
        start_date=start_date,
        end_date=end_date,
        period=period,
    ))


@router.get("/{payment_id}", response_model=PaymentRead)
def get_payment(
    payment_id: uuid.UUID,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    return unwrap(payments.get_payment(session, caller, payment_id))


@router.post("/", response_model=PaymentRead, status_code=status.HTTP_201_CREATED)
def create_payment(
    payment_data: PaymentCreate,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    """Record a manual payment"""
    return unwrap(payments.create_payment(session, caller, payment_data))


@router.patch("/{payment_id}/status", response_model=PaymentRead)
def update_payment_status(
    payment_id: uuid.UUID,
    status_data: PaymentStatusUpdate,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    return unwrap(payments.update_payment_status(
        session, caller, payment_id, status_data.status, received_date=status_data.received_date
    ))
