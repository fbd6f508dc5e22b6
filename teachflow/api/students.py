"""
Students API endpoints
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session
from typing import List, Optional
import uuid

from teachflow.api.responses import unwrap
from teachflow.core.context import Caller
from teachflow.core.database import get_session
from teachflow.core.dependencies import get_current_caller
from teachflow.models import StudentStatus
from teachflow.schemas.student import StudentCreate, StudentDetail, StudentRead, StudentUpdate
from teachflow.services import students

router = APIRouter()


@router.get("/", response_model=List[StudentRead])
def list_students(
    status_filter: Optional[StudentStatus] = Query(default=None, alias="status"),
    contractor_id: Optional[uuid.UUID] = None,
    search: Optional[str] = None,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    """List students; ``search`` matches name or email, case-insensitively"""
    return unwrap(students.list_students(
        session, caller, status=status_filter, contractor_id=contractor_id, search=search
    ))


@router.get("/{student_id}", response_model=StudentDetail)
def get_student(
    student_id: uuid.UUID,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    return unwrap(students.get_student(session, caller, student_id))


@router.post("/", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
def create_student(
    student_data: StudentCreate,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    return unwrap(students.create_student(session, caller, student_data))


@router.put("/{student_id}", response_model=StudentRead)
def update_student(
    student_id: uuid.UUID,
    student_data: StudentUpdate,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    return unwrap(students.update_student(session, caller, student_id, student_data))


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(
    student_id: uuid.UUID,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    unwrap(students.delete_student(session, caller, student_id))
