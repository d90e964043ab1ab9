"""
Application routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from campushire.core.database import get_db
from campushire.core.exceptions import AuthorizationError, ValidationError
from campushire.auth.dependencies import get_current_active_user, require_staff
from campushire.applications.service import application_service
from campushire.applications.schemas import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationDetailResponse,
    BulkItemResult,
    BulkUpdate,
    ReviewUpdate,
    ScoreUpdate,
    StatusUpdate,
)
from campushire.models.user import User, Role
from campushire.pipeline.planner import UNSET
from campushire.pipeline.states import ApplicationStatus, BULK_ACTIONS
from campushire.students.service import student_service

router = APIRouter(prefix="/api/v1/applications", tags=["Applications"])


@router.post("/", response_model=ApplicationDetailResponse, status_code=status.HTTP_201_CREATED)
def submit_application(
    application_data: ApplicationCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Apply to an opening through its open window"""
    if current_user.role == Role.STUDENT.value:
        student_id = student_service.get_for_user(db, current_user.id).id
    elif application_data.student_id is None:
        raise ValidationError("student_id is required when applying on a student's behalf")
    else:
        student_id = application_data.student_id
    
    return application_service.create_application(
        db,
        student_id=student_id,
        opening_id=application_data.opening_id,
        form_data=application_data.form_data.model_dump(),
        resume_url=application_data.resume_url,
    )


@router.get("/", response_model=List[ApplicationResponse])
def list_applications(
    opening_id: Optional[int] = None,
    status: Optional[ApplicationStatus] = None,
    round_id: Optional[int] = None,
    student_id: Optional[int] = None,
    min_score: Optional[float] = Query(None, ge=0, le=100),
    max_score: Optional[float] = Query(None, ge=0, le=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return application_service.list_applications(
        db,
        opening_id=opening_id,
        status=status,
        round_id=round_id,
        student_id=student_id,
        min_score=min_score,
        max_score=max_score,
        skip=skip,
        limit=limit,
    )


@router.get("/mine", response_model=List[ApplicationResponse])
def list_my_applications(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    student = student_service.get_for_user(db, current_user.id)
    return application_service.list_applications(db, student_id=student.id)


@router.get("/{application_id}", response_model=ApplicationDetailResponse)
def get_application(
    application_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    application = application_service.get_application(db, application_id)
    if current_user.role == Role.STUDENT.value:
        student = student_service.get_for_user(db, current_user.id)
        if application.student_id != student.id:
            raise AuthorizationError("Not your application")
    return application


@router.put("/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: int,
    status_data: StatusUpdate,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Move an application through the pipeline"""
    return application_service.update_status(
        db, application_id, status_data.status, current_user.id, notes=status_data.notes
    )


@router.put("/{application_id}/score", response_model=ApplicationResponse)
def update_application_score(
    application_id: int,
    score_data: ScoreUpdate,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return application_service.update_score(
        db, application_id, score_data.score, current_user.id, notes=score_data.notes
    )


@router.put("/{application_id}/review", response_model=ApplicationResponse)
def review_application(
    application_id: int,
    review_data: ReviewUpdate,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Change status and score together; recorded as one review"""
    score = review_data.score if "score" in review_data.model_fields_set else UNSET
    return application_service.review_application(
        db,
        application_id,
        current_user.id,
        status=review_data.status,
        score=score,
        notes=review_data.notes,
    )


@router.post("/bulk-update", response_model=List[BulkItemResult])
def bulk_update_applications(
    bulk_data: BulkUpdate,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Same review over many applications; failures are reported per item"""
    new_status = BULK_ACTIONS[bulk_data.action] if bulk_data.action else None
    score = bulk_data.score if "score" in bulk_data.model_fields_set else UNSET
    return application_service.bulk_update(
        db,
        bulk_data.application_ids,
        current_user.id,
        status=new_status,
        score=score,
        notes=bulk_data.notes,
    )
