"""
Contractors API endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List
import uuid

from teachflow.api.responses import unwrap
from teachflow.core.context import Caller
from teachflow.core.database import get_session
from teachflow.core.dependencies import get_current_caller
from teachflow.schemas.contractor import (
    ContractorCreate, ContractorDetail, ContractorRead, ContractorUpdate
)
from teachflow.services import contractors

router = APIRouter()


@router.get("/", response_model=List[ContractorRead])
def list_contractors(
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    """List all contractors of the current teacher"""
    return unwrap(contractors.list_contractors(session, caller))


@router.get("/{contractor_id}", response_model=ContractorDetail)
def get_contractor(
    contractor_id: uuid.UUID,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    """Get contractor with counts of linked students, classes and payments"""
    return unwrap(contractors.get_contractor(session, caller, contractor_id))


@router.post("/", response_model=ContractorRead, status_code=status.HTTP_201_CREATED)
def create_contractor(
    contractor_data: ContractorCreate,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    return unwrap(contractors.create_contractor(session, caller, contractor_data))


@router.put("/{contractor_id}", response_model=ContractorRead)
def update_contractor(
    contractor_id: uuid.UUID,
    contractor_data: ContractorUpdate,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    return unwrap(contractors.update_contractor(session, caller, contractor_id, contractor_data))


@router.delete("/{contractor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contractor(
    contractor_id: uuid.UUID,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    """Delete a contractor that has no students, classes or payments"""
    unwrap(contractors.delete_contractor(session, caller, contractor_id))
