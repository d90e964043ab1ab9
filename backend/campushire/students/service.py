"""
Student registry
"""
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import structlog

from campushire.core.exceptions import NotFoundError, ValidationError
from campushire.models.student import Student

logger = structlog.get_logger()

# Placement fields are owned by the placement finalizer
EDITABLE_FIELDS = ("full_name", "email", "branch", "batch", "cgpa", "backlogs")


class StudentService:
    
    def get_student(self, db: Session, student_id: int) -> Student:
        student = db.query(Student).filter(Student.id == student_id).first()
        if not student:
            raise NotFoundError("Student", student_id)
        return student
    
    def get_for_user(self, db: Session, user_id: int) -> Student:
        student = db.query(Student).filter(Student.user_id == user_id).first()
        if not student:
            raise NotFoundError("Student profile for user", user_id)
        return student
    
    def list_students(
        self,
        db: Session,
        branch: Optional[str] = None,
        batch: Optional[int] = None,
        placed: Optional[bool] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Student]:
        query = db.query(Student)
        if branch is not None:
            query = query.filter(Student.branch == branch)
        if batch is not None:
            query = query.filter(Student.batch == batch)
        if placed is not None:
            query = query.filter(Student.placed == placed)
        return query.order_by(Student.roll_number).offset(skip).limit(limit).all()
    
    def create_student(self, db: Session, data: Dict[str, Any]) -> Student:
        student = Student(
            user_id=data.get("user_id"),
            roll_number=data["roll_number"],
            placed=False,
        )
        for field in EDITABLE_FIELDS:
            if data.get(field) is not None:
                setattr(student, field, data[field])
        
        db.add(student)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ValidationError(
                "Roll number or user account is already registered",
                details={"roll_number": data["roll_number"]},
            )
        db.refresh(student)
        
        logger.info("student_created", student_id=student.id, roll_number=student.roll_number)
        return student
    
    def update_student(self, db: Session, student_id: int, data: Dict[str, Any]) -> Student:
        student = self.get_student(db, student_id)
        for field in EDITABLE_FIELDS:
            if field in data:
                setattr(student, field, data[field])
        db.commit()
        db.refresh(student)
        
        logger.info("student_updated", student_id=student_id, fields=sorted(data))
        return student


student_service = StudentService()
