"""
Student notification routes
"""
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from campushire.core.database import get_db
from campushire.core.exceptions import NotFoundError
from campushire.auth.dependencies import require_role
from campushire.models.notification import Notification
from campushire.models.user import User
from campushire.notifications.schemas import NotificationResponse
from campushire.students.service import student_service

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


@router.get("/", response_model=List[NotificationResponse])
def list_notifications(
    unread_only: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(require_role("student")),
    db: Session = Depends(get_db),
):
    student = student_service.get_for_user(db, current_user.id)
    query = db.query(Notification).filter(Notification.student_id == student.id)
    if unread_only:
        query = query.filter(Notification.is_read == False)
    return query.order_by(Notification.id.desc()).offset(skip).limit(limit).all()


@router.put("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: int,
    current_user: User = Depends(require_role("student")),
    db: Session = Depends(get_db),
):
    student = student_service.get_for_user(db, current_user.id)
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.student_id == student.id)
        .first()
    )
    if not notification:
        raise NotFoundError("Notification", notification_id)
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification
