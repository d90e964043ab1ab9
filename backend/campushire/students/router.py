"""
Student routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from campushire.core.database import get_db
from campushire.auth.dependencies import require_role, require_staff
from campushire.models.user import User
from campushire.students.service import student_service
from campushire.students.schemas import StudentCreate, StudentUpdate, StudentResponse

router = APIRouter(prefix="/api/v1/students", tags=["Students"])


@router.post("/", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    student_data: StudentCreate,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    return student_service.create_student(db, student_data.model_dump())


@router.get("/", response_model=List[StudentResponse])
def list_students(
    branch: Optional[str] = None,
    batch: Optional[int] = None,
    placed: Optional[bool] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return student_service.list_students(
        db, branch=branch, batch=batch, placed=placed, skip=skip, limit=limit
    )


@router.get("/me", response_model=StudentResponse)
def get_my_profile(
    current_user: User = Depends(require_role("student")),
    db: Session = Depends(get_db),
):
    return student_service.get_for_user(db, current_user.id)


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(
    student_id: int,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return student_service.get_student(db, student_id)


@router.patch("/{student_id}", response_model=StudentResponse)
def update_student(
    student_id: int,
    student_data: StudentUpdate,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    """Update the academic record; placement is not editable here"""
    return student_service.update_student(db, student_id, student_data.model_dump(exclude_unset=True))
