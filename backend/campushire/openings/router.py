"""
Recruitment opening routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from campushire.core.database import get_db
from campushire.auth.dependencies import get_current_active_user, require_staff
from campushire.models.opening import OpeningStatus
from campushire.models.user import User
from campushire.openings.service import opening_service
from campushire.openings.schemas import (
    OpeningCreate,
    OpeningUpdate,
    OpeningStatusUpdate,
    OpeningResponse,
)

router = APIRouter(prefix="/api/v1/openings", tags=["Openings"])


@router.post("/", response_model=OpeningResponse, status_code=status.HTTP_201_CREATED)
def create_opening(
    opening_data: OpeningCreate,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Create a recruitment opening"""
    return opening_service.create_opening(db, opening_data.model_dump(), created_by=current_user.id)


@router.get("/", response_model=List[OpeningResponse])
def list_openings(
    status: Optional[OpeningStatus] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """List openings"""
    return opening_service.list_openings(db, status=status, skip=skip, limit=limit)


@router.get("/{opening_id}", response_model=OpeningResponse)
def get_opening(
    opening_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return opening_service.get_opening(db, opening_id)


@router.patch("/{opening_id}", response_model=OpeningResponse)
def update_opening(
    opening_id: int,
    opening_data: OpeningUpdate,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return opening_service.update_opening(db, opening_id, opening_data.model_dump(exclude_unset=True))


@router.put("/{opening_id}/status", response_model=OpeningResponse)
def update_opening_status(
    opening_id: int,
    status_data: OpeningStatusUpdate,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Activate, deactivate or complete an opening"""
    return opening_service.update_status(db, opening_id, status_data.status)
