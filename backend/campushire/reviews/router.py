"""
Review history routes
"""
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from campushire.core.database import get_db
from campushire.auth.dependencies import require_staff
from campushire.applications.service import application_service
from campushire.models.user import User
from campushire.reviews.audit import review_audit
from campushire.reviews.schemas import ReviewHistoryResponse

router = APIRouter(prefix="/api/v1", tags=["Review History"])


@router.get("/applications/{application_id}/history", response_model=List[ReviewHistoryResponse])
def get_application_history(
    application_id: int,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Reviews of one application, most recent first"""
    application_service.get_application(db, application_id)
    return review_audit.history_for_application(db, application_id, skip=skip, limit=limit)


@router.get("/reviewers/{reviewer_id}/history", response_model=List[ReviewHistoryResponse])
def get_reviewer_history(
    reviewer_id: int,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Reviews by one reviewer, most recent first"""
    return review_audit.history_for_reviewer(db, reviewer_id, skip=skip, limit=limit)
