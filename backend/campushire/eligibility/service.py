"""
Eligibility lookups around the pure evaluator
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
import structlog

from campushire.core.clock import campus_now
from campushire.core.config import settings
from campushire.core.exceptions import NotFoundError, ValidationError
from campushire.eligibility.evaluator import EligibilityResult, evaluate
from campushire.models.application import Application
from campushire.models.opening import RecruitmentOpening
from campushire.models.student import Student
from campushire.windows.registry import window_registry

logger = structlog.get_logger()


class EligibilityService:
    """Resolve the inputs for an eligibility decision and evaluate it"""
    
    def has_applied(self, db: Session, student_id: int, opening_id: int) -> bool:
        return (
            db.query(Application.id)
            .filter(Application.student_id == student_id, Application.opening_id == opening_id)
            .first()
            is not None
        )
    
    def check_student(
        self,
        db: Session,
        student: Student,
        opening: RecruitmentOpening,
        now: Optional[datetime] = None,
    ) -> EligibilityResult:
        now = now or campus_now()
        window = window_registry.find_open_window(db, opening.id, now)
        return evaluate(
            student,
            window,
            now,
            already_applied=self.has_applied(db, student.id, opening.id),
            opening=opening,
        )
    
    def check(
        self,
        db: Session,
        student_id: int,
        opening_id: int,
        now: Optional[datetime] = None,
    ) -> EligibilityResult:
        student = db.query(Student).filter(Student.id == student_id).first()
        if not student:
            raise NotFoundError("Student", student_id)
        opening = db.query(RecruitmentOpening).filter(RecruitmentOpening.id == opening_id).first()
        if not opening:
            raise NotFoundError("Opening", opening_id)
        
        result = self.check_student(db, student, opening, now)
        logger.debug(
            "eligibility_checked",
            student_id=student_id,
            opening_id=opening_id,
            eligible=result.eligible,
            reason=result.reason,
        )
        return result
    
    def bulk_check(
        self,
        db: Session,
        student_ids: List[int],
        opening_ids: List[int],
        now: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """
        Evaluate every student against every opening.
        
        Pairs the student already applied to are left out of both lists.
        Unknown ids are reported per student rather than failing the batch.
        """
        if len(student_ids) > settings.BULK_ELIGIBILITY_MAX_STUDENTS:
            raise ValidationError(
                f"At most {settings.BULK_ELIGIBILITY_MAX_STUDENTS} students per request"
            )
        if len(opening_ids) > settings.BULK_ELIGIBILITY_MAX_OPENINGS:
            raise ValidationError(
                f"At most {settings.BULK_ELIGIBILITY_MAX_OPENINGS} openings per request"
            )
        
        now = now or campus_now()
        openings = (
            db.query(RecruitmentOpening).filter(RecruitmentOpening.id.in_(opening_ids)).all()
        )
        windows = {
            opening.id: window_registry.find_open_window(db, opening.id, now)
            for opening in openings
        }
        
        results = []
        for student_id in student_ids:
            student = db.query(Student).filter(Student.id == student_id).first()
            if not student:
                results.append({"student_id": student_id, "error": f"Student not found: {student_id}"})
                continue
            
            applied = {
                opening_id
                for (opening_id,) in db.query(Application.opening_id)
                .filter(Application.student_id == student_id)
                .all()
            }
            eligible, ineligible = [], []
            for opening in openings:
                if opening.id in applied:
                    continue
                result = evaluate(student, windows[opening.id], now, opening=opening)
                if result.eligible:
                    eligible.append({"opening_id": opening.id, "company_name": opening.company_name})
                else:
                    ineligible.append({
                        "opening_id": opening.id,
                        "company_name": opening.company_name,
                        "reason": result.reason,
                    })
            results.append({
                "student_id": student_id,
                "eligible": eligible,
                "ineligible": ineligible,
            })
        
        logger.info(
            "bulk_eligibility_checked",
            students=len(student_ids),
            openings=len(openings),
        )
        return results


eligibility_service = EligibilityService()
