"""
Classes API endpoints
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
from teachflow.models import ClassStatus
from teachflow.schemas.class_record import ClassCreate, ClassRead, ClassStatusResponse, ClassStatusUpdate
from teachflow.schemas.payment import PaymentRead
from teachflow.services import classes

router = APIRouter()


@router.get("/", response_model=List[ClassRead])
def list_classes(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    student_id: Optional[uuid.UUID] = None,
    contractor_id: Optional[uuid.UUID] = None,
    status_filter: Optional[ClassStatus] = Query(default=None, alias="status"),
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    """List classes ordered by start time"""
    return unwrap(classes.list_classes(
        session,
        caller,
        start_date=start_date,
        end_date=end_date,
        student_id=student_id,
        contractor_id=contractor_id,
        status=status_filter,
    ))


@router.get("/{class_id}", response_model=ClassRead)
def get_class(
    class_id: uuid.UUID,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    return unwrap(classes.get_class(session, caller, class_id))


@router.post("/", response_model=ClassRead, status_code=status.HTTP_201_CREATED)
def create_class(
    class_data: ClassCreate,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    """Schedule a class for one of the teacher's students"""
    return unwrap(classes.create_class(session, caller, class_data))


@router.patch("/{class_id}/status", response_model=ClassStatusResponse)
def update_class_status(
    class_id: uuid.UUID,
    status_data: ClassStatusUpdate,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    """Change class status; completing a class bills it once"""
    result = classes.update_class_status(
        session, caller, class_id, status_data.status, notes=status_data.class_notes
    )
    class_record = unwrap(result)
    payment = result.extras.get("payment")

    return ClassStatusResponse(
        class_record=ClassRead.model_validate(class_record),
        payment=PaymentRead.model_validate(payment) if payment is not None else None,
        warnings=result.warnings,
    )


@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_class(
    class_id: uuid.UUID,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    unwrap(classes.delete_class(session, caller, class_id))
