"""
Application record store

Creation goes through the window registry and the eligibility evaluator;
every later change is planned by ``pipeline.planner`` and applied by
``pipeline.executor`` in a single transaction per application.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import structlog

from campushire.core.clock import campus_now
from campushire.core.config import settings
from campushire.core.exceptions import (
    CampusHireException,
    ConflictError,
    IneligibleError,
    NotFoundError,
    ValidationError,
)
from campushire.eligibility.service import eligibility_service
from campushire.models.application import Application
from campushire.models.opening import RecruitmentOpening
from campushire.models.round import OPEN_ROUND_STATUSES, RecruitmentRound
from campushire.models.student import Student
from campushire.notifications.dispatcher import notification_dispatcher
from campushire.pipeline.executor import pipeline_executor
from campushire.pipeline.planner import UNSET, ApplicationSnapshot, plan_review
from campushire.pipeline.states import ApplicationStatus

logger = structlog.get_logger()

MAX_NOTES_LENGTH = 1000


def _check_notes(notes: Optional[str]) -> None:
    if notes is not None and len(notes) > MAX_NOTES_LENGTH:
        raise ValidationError(f"Notes cannot exceed {MAX_NOTES_LENGTH} characters")


class ApplicationService:
    """One application per student and opening, moved by recruiter reviews"""
    
    def get_application(self, db: Session, application_id: int) -> Application:
        application = db.query(Application).filter(Application.id == application_id).first()
        if not application:
            raise NotFoundError("Application", application_id)
        return application
    
    def list_applications(
        self,
        db: Session,
        opening_id: Optional[int] = None,
        status: Optional[str] = None,
        round_id: Optional[int] = None,
        student_id: Optional[int] = None,
        min_score: Optional[float] = None,
        max_score: Optional[float] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Application]:
        query = db.query(Application)
        if opening_id is not None:
            query = query.filter(Application.opening_id == opening_id)
        if status is not None:
            query = query.filter(Application.status == ApplicationStatus(status).value)
        if round_id is not None:
            query = query.filter(Application.current_round_id == round_id)
        if student_id is not None:
            query = query.filter(Application.student_id == student_id)
        if min_score is not None:
            query = query.filter(Application.score >= min_score)
        if max_score is not None:
            query = query.filter(Application.score <= max_score)
        return (
            query.order_by(Application.submitted_at.desc(), Application.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
    
    def create_application(
        self,
        db: Session,
        student_id: int,
        opening_id: int,
        form_data: Optional[Dict[str, Any]] = None,
        resume_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Application:
        """
        Submit an application.
        
        Raises IneligibleError with the evaluator's reason when the student
        may not apply, and ConflictError when a concurrent submission for the
        same student and opening committed first.
        """
        student = db.query(Student).filter(Student.id == student_id).first()
        if not student:
            raise NotFoundError("Student", student_id)
        opening = db.query(RecruitmentOpening).filter(RecruitmentOpening.id == opening_id).first()
        if not opening:
            raise NotFoundError("Opening", opening_id)
        
        now = now or campus_now()
        if not opening.is_application_open(now):
            raise ValidationError(
                "Applications are closed for this opening",
                details={"opening_id": opening_id, "status": opening.status},
            )
        
        result = eligibility_service.check_student(db, student, opening, now)
        if not result.eligible:
            logger.info(
                "application_rejected_ineligible",
                student_id=student_id,
                opening_id=opening_id,
                reason=result.reason,
            )
            raise IneligibleError(result.reason, details={"opening_id": opening_id})
        
        application = Application(
            student_id=student_id,
            opening_id=opening_id,
            status=ApplicationStatus.SUBMITTED.value,
            form_data=form_data or {},
            resume_url=resume_url,
        )
        db.add(application)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(
                "application_duplicate_race",
                student_id=student_id,
                opening_id=opening_id,
                error=str(e.orig),
            )
            raise ConflictError(
                "An application for this opening was submitted concurrently",
                details={"student_id": student_id, "opening_id": opening_id},
            )
        db.refresh(application)
        
        logger.info(
            "application_submitted",
            application_id=application.id,
            student_id=student_id,
            opening_id=opening_id,
        )
        return application
    
    def entry_round(self, db: Session, opening_id: int) -> Optional[RecruitmentRound]:
        """Lowest-numbered round of the opening still taking candidates"""
        return (
            db.query(RecruitmentRound)
            .filter(
                RecruitmentRound.opening_id == opening_id,
                RecruitmentRound.status.in_(OPEN_ROUND_STATUSES),
            )
            .order_by(RecruitmentRound.round_number)
            .first()
        )
    
    def review_application(
        self,
        db: Session,
        application_id: int,
        reviewer_id: Optional[int],
        status: Optional[ApplicationStatus] = None,
        score: Any = UNSET,
        notes: Optional[str] = None,
    ) -> Application:
        """
        Change status, score or both, with one history row for the change.
        
        Shortlisting an application that is not yet in a round places it in
        the opening's first round; selecting it places the student.
        """
        _check_notes(notes)
        application = self.get_application(db, application_id)
        snapshot = ApplicationSnapshot.of(application)
        
        entry_round_id = None
        if status is not None and ApplicationStatus(status) == ApplicationStatus.SHORTLISTED:
            entry = self.entry_round(db, application.opening_id)
            entry_round_id = entry.id if entry else None
        
        commands = plan_review(snapshot, status, score, entry_round_id)
        try:
            events = pipeline_executor.execute(
                db, application, commands, reviewer_id=reviewer_id, notes=notes
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(application)
        
        logger.info(
            "application_reviewed",
            application_id=application.id,
            reviewer_id=reviewer_id,
            old_status=snapshot.status.value,
            new_status=application.status,
            old_score=snapshot.score,
            new_score=application.score,
        )
        notification_dispatcher.dispatch(events)
        return application
    
    def update_status(
        self,
        db: Session,
        application_id: int,
        new_status: ApplicationStatus,
        reviewer_id: Optional[int],
        notes: Optional[str] = None,
    ) -> Application:
        return self.review_application(db, application_id, reviewer_id, status=new_status, notes=notes)
    
    def update_score(
        self,
        db: Session,
        application_id: int,
        new_score: Optional[float],
        reviewer_id: Optional[int],
        notes: Optional[str] = None,
    ) -> Application:
        return self.review_application(db, application_id, reviewer_id, score=new_score, notes=notes)
    
    def bulk_update(
        self,
        db: Session,
        application_ids: List[int],
        reviewer_id: Optional[int],
        status: Optional[ApplicationStatus] = None,
        score: Any = UNSET,
        notes: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Apply the same review to many applications, one transaction each"""
        if not application_ids:
            raise ValidationError("No applications given")
        if len(application_ids) > settings.BULK_UPDATE_MAX_ITEMS:
            raise ValidationError(
                f"At most {settings.BULK_UPDATE_MAX_ITEMS} applications per request"
            )
        
        results = []
        for application_id in application_ids:
            try:
                application = self.review_application(
                    db, application_id, reviewer_id, status=status, score=score, notes=notes
                )
                results.append({
                    "application_id": application_id,
                    "success": True,
                    "status": application.status,
                    "score": application.score,
                })
            except CampusHireException as e:
                logger.warning(
                    "bulk_update_item_failed",
                    application_id=application_id,
                    error=e.message,
                )
                results.append({
                    "application_id": application_id,
                    "success": False,
                    "error": e.message,
                })
            except Exception as e:
                logger.exception("bulk_update_item_error", application_id=application_id, error=str(e))
                results.append({
                    "application_id": application_id,
                    "success": False,
                    "error": str(e),
                })

        logger.info(
            "bulk_update_completed",
            requested=len(application_ids),
            succeeded=sum(1 for r in results if r["success"]),
        )
        return results


application_service = ApplicationService()
