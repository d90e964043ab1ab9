"""
Student notification tasks
"""
from typing import Any, Dict, Optional

from celery import Task
from sqlalchemy.orm import Session
import structlog

from campushire.core.celery_app import celery_app
from campushire.core.database import SessionLocal
from campushire.eligibility.evaluator import check_academics, resolve_criteria
from campushire.models.notification import Notification
from campushire.models.opening import RecruitmentOpening
from campushire.models.student import Student
from campushire.pipeline.states import ApplicationStatus

logger = structlog.get_logger()


def status_message(company: str, status: str) -> Optional[str]:
    messages = {
        ApplicationStatus.SELECTED.value: f"Congratulations! You have been selected by {company}!",
        ApplicationStatus.REJECTED.value: f"Your application for {company} has been rejected.",
        ApplicationStatus.SHORTLISTED.value: f"Your application for {company} has been shortlisted for the next round.",
    }
    return messages.get(status)


@celery_app.task(bind=True, max_retries=3)
def notify_application_status_task(self: Task, payload: Dict[str, Any]):
    """Store an in-app notification for an application status change"""
    db: Session = SessionLocal()
    try:
        opening = (
            db.query(RecruitmentOpening)
            .filter(RecruitmentOpening.id == payload["opening_id"])
            .first()
        )
        company = opening.company_name if opening else "the company"
        message = status_message(company, payload["new_status"])
        if message is None:
            return None
        
        notification = Notification(
            student_id=payload["student_id"],
            type="application_status",
            title="Application Status Update",
            message=message,
            payload=payload,
        )
        db.add(notification)
        db.commit()
        
        logger.info(
            "status_notification_created",
            notification_id=notification.id,
            application_id=payload.get("application_id"),
            new_status=payload["new_status"],
        )
        return notification.id
    except Exception as e:
        db.rollback()
        logger.exception(
            "status_notification_failed",
            application_id=payload.get("application_id"),
            error=str(e),
        )
        raise self.retry(exc=e, countdown=30)
    finally:
        db.close()


@celery_app.task(bind=True, max_retries=3)
def notify_new_opening_task(self: Task, opening_id: int):
    """Tell unplaced students who meet the opening's criteria about it"""
    db: Session = SessionLocal()
    try:
        opening = db.query(RecruitmentOpening).filter(RecruitmentOpening.id == opening_id).first()
        if not opening:
            logger.warning("new_opening_notification_skipped", opening_id=opening_id)
            return 0
        
        criteria = resolve_criteria(None, opening)
        students = db.query(Student).filter(Student.placed == False).all()
        created = 0
        for student in students:
            if check_academics(student, criteria):
                continue
            db.add(Notification(
                student_id=student.id,
                type="new_opening",
                title="New Opening",
                message=f"New company {opening.company_name} is now hiring! Check if you're eligible.",
                payload={"opening_id": opening.id},
            ))
            created += 1
        db.commit()
        
        logger.info("new_opening_notifications_created", opening_id=opening_id, count=created)
        return created
    except Exception as e:
        db.rollback()
        logger.exception("new_opening_notification_failed", opening_id=opening_id, error=str(e))
        raise self.retry(exc=e, countdown=30)
    finally:
        db.close()
