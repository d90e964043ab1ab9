"""
Application window routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from campushire.core.database import get_db
from campushire.auth.dependencies import get_current_active_user, require_staff
from campushire.models.user import User
from campushire.windows.registry import window_registry
from campushire.windows.schemas import (
    WindowCreate,
    WindowUpdate,
    WindowResponse,
    EligibleCountResponse,
)

router = APIRouter(prefix="/api/v1", tags=["Application Windows"])


@router.post(
    "/openings/{opening_id}/windows",
    response_model=WindowResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_window(
    opening_id: int,
    window_data: WindowCreate,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Open an application window for an opening"""
    return window_registry.create_window(
        db, opening_id, window_data.model_dump(), created_by=current_user.id
    )


@router.get("/windows", response_model=List[WindowResponse])
def list_windows(
    opening_id: Optional[int] = None,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return window_registry.list_windows(db, opening_id=opening_id)


@router.get("/windows/open", response_model=List[WindowResponse])
def list_open_windows(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Windows accepting applications right now"""
    return window_registry.get_open_windows(db)


@router.get("/windows/upcoming", response_model=List[WindowResponse])
def list_upcoming_windows(
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Windows that have not started yet, soonest first"""
    return window_registry.get_upcoming_windows(db, limit=limit)


@router.get("/windows/{window_id}", response_model=WindowResponse)
def get_window(
    window_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return window_registry.get_window(db, window_id)


@router.patch("/windows/{window_id}", response_model=WindowResponse)
def update_window(
    window_id: int,
    window_data: WindowUpdate,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return window_registry.update_window(db, window_id, window_data.model_dump(exclude_unset=True))


@router.delete("/windows/{window_id}", response_model=WindowResponse)
def deactivate_window(
    window_id: int,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Windows are deactivated, never deleted"""
    return window_registry.deactivate_window(db, window_id)


@router.get("/windows/{window_id}/eligible-count", response_model=EligibleCountResponse)
def get_eligible_count(
    window_id: int,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Forecast of unplaced students meeting the window's criteria"""
    window = window_registry.get_window(db, window_id)
    return EligibleCountResponse(
        window_id=window.id,
        eligible_students=window_registry.count_eligible_students(db, window),
    )
