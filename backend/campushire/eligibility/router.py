"""
Eligibility routes
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campushire.core.database import get_db
from campushire.auth.dependencies import get_current_active_user, require_staff
from campushire.eligibility.schemas import (
    BulkEligibilityRequest,
    EligibilityResponse,
    StudentEligibility,
)
from campushire.eligibility.service import eligibility_service
from campushire.models.user import User

router = APIRouter(prefix="/api/v1/eligibility", tags=["Eligibility"])


@router.get("/students/{student_id}/openings/{opening_id}", response_model=EligibilityResponse)
def check_eligibility(
    student_id: int,
    opening_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Whether a student could apply to an opening right now"""
    result = eligibility_service.check(db, student_id, opening_id)
    return EligibilityResponse(
        student_id=student_id,
        opening_id=opening_id,
        eligible=result.eligible,
        reason=result.reason,
    )


@router.post("/bulk", response_model=List[StudentEligibility])
def bulk_check_eligibility(
    request: BulkEligibilityRequest,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return eligibility_service.bulk_check(db, request.student_ids, request.opening_ids)
