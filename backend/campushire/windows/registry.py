"""
Application window registry
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, and_
from sqlalchemy.orm import Session
import structlog

from campushire.core.clock import campus_now
from campushire.core.config import settings
from campushire.core.exceptions import NotFoundError, ValidationError
from campushire.core.redis_client import get_cache, set_cache, delete_cache, get_cache_key
from campushire.eligibility.evaluator import resolve_criteria
from campushire.models.opening import RecruitmentOpening
from campushire.models.student import Student
from campushire.models.window import ApplicationWindow

logger = structlog.get_logger()

WINDOW_FIELDS = (
    "description",
    "start_date",
    "end_date",
    "start_time",
    "end_time",
    "min_cgpa",
    "max_backlogs",
    "eligible_branches",
    "passing_year",
    "is_active",
)

# NOT NULL columns; an update may change them but never clear them
REQUIRED_WINDOW_FIELDS = frozenset({"start_date", "end_date", "start_time", "end_time", "is_active"})


class WindowRegistry:
    """Time-boxed eligibility windows per opening"""
    
    def get_window(self, db: Session, window_id: int) -> ApplicationWindow:
        window = db.query(ApplicationWindow).filter(ApplicationWindow.id == window_id).first()
        if not window:
            raise NotFoundError("Application window", window_id)
        return window
    
    def create_window(
        self,
        db: Session,
        opening_id: int,
        data: Dict[str, Any],
        created_by: Optional[int] = None,
    ) -> ApplicationWindow:
        opening = db.query(RecruitmentOpening).filter(RecruitmentOpening.id == opening_id).first()
        if not opening:
            raise NotFoundError("Opening", opening_id)
        
        window = ApplicationWindow(opening_id=opening_id, created_by=created_by)
        for field in WINDOW_FIELDS:
            if field in data and data[field] is not None:
                setattr(window, field, data[field])
        if window.is_active is None:
            window.is_active = True
        self._validate_range(window)
        
        db.add(window)
        db.commit()
        db.refresh(window)
        
        logger.info(
            "application_window_created",
            window_id=window.id,
            opening_id=opening_id,
            start=window.start_instant.isoformat(),
            end=window.end_instant.isoformat(),
        )
        return window
    
    def update_window(self, db: Session, window_id: int, data: Dict[str, Any]) -> ApplicationWindow:
        cleared = sorted(field for field in REQUIRED_WINDOW_FIELDS if field in data and data[field] is None)
        if cleared:
            raise ValidationError("Fields cannot be null", details={"fields": cleared})
        window = self.get_window(db, window_id)
        for field in WINDOW_FIELDS:
            if field in data:
                setattr(window, field, data[field])
        try:
            self._validate_range(window)
        except ValidationError:
            db.rollback()
            raise
        
        db.commit()
        db.refresh(window)
        delete_cache(get_cache_key("eligible_count", window.id))
        
        logger.info("application_window_updated", window_id=window.id, fields=sorted(data))
        return window
    
    def deactivate_window(self, db: Session, window_id: int) -> ApplicationWindow:
        return self.update_window(db, window_id, {"is_active": False})
    
    def list_windows(self, db: Session, opening_id: Optional[int] = None) -> List[ApplicationWindow]:
        query = db.query(ApplicationWindow)
        if opening_id is not None:
            query = query.filter(ApplicationWindow.opening_id == opening_id)
        return query.order_by(ApplicationWindow.start_date, ApplicationWindow.start_time).all()
    
    def get_open_windows(self, db: Session, now: Optional[datetime] = None) -> List[ApplicationWindow]:
        """Active windows whose date and time range contains ``now``"""
        now = now or campus_now()
        today = now.date()
        # Date range narrows in SQL, the time-of-day bounds are applied per row
        candidates = (
            db.query(ApplicationWindow)
            .filter(
                ApplicationWindow.is_active == True,
                ApplicationWindow.start_date <= today,
                ApplicationWindow.end_date >= today,
            )
            .order_by(ApplicationWindow.start_date, ApplicationWindow.start_time, ApplicationWindow.id)
            .all()
        )
        return [window for window in candidates if window.is_open(now)]
    
    def find_open_window(
        self,
        db: Session,
        opening_id: int,
        now: Optional[datetime] = None,
    ) -> Optional[ApplicationWindow]:
        """Earliest-starting open window for an opening, if any"""
        now = now or campus_now()
        today = now.date()
        candidates = (
            db.query(ApplicationWindow)
            .filter(
                ApplicationWindow.opening_id == opening_id,
                ApplicationWindow.is_active == True,
                ApplicationWindow.start_date <= today,
                ApplicationWindow.end_date >= today,
            )
            .order_by(ApplicationWindow.start_date, ApplicationWindow.start_time, ApplicationWindow.id)
            .all()
        )
        for window in candidates:
            if window.is_open(now):
                return window
        return None
    
    def get_upcoming_windows(
        self,
        db: Session,
        now: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[ApplicationWindow]:
        """Active windows that start after ``now``, soonest first"""
        now = now or campus_now()
        limit = limit or settings.UPCOMING_WINDOWS_LIMIT
        return (
            db.query(ApplicationWindow)
            .filter(
                ApplicationWindow.is_active == True,
                or_(
                    ApplicationWindow.start_date > now.date(),
                    and_(
                        ApplicationWindow.start_date == now.date(),
                        ApplicationWindow.start_time > now.time(),
                    ),
                ),
            )
            .order_by(ApplicationWindow.start_date, ApplicationWindow.start_time, ApplicationWindow.id)
            .limit(limit)
            .all()
        )
    
    def count_eligible_students(self, db: Session, window: ApplicationWindow) -> int:
        """Unplaced students passing the window's academic criteria.
        
        Forecast only: whether a student already applied is not considered.
        """
        cache_key = get_cache_key("eligible_count", window.id)
        cached = get_cache(cache_key)
        if cached is not None:
            return int(cached)
        
        criteria = resolve_criteria(window, window.opening)
        query = db.query(func.count(Student.id)).filter(Student.placed == False)
        if criteria.min_cgpa is not None:
            query = query.filter(func.coalesce(Student.cgpa, 0.0) >= criteria.min_cgpa)
        if criteria.max_backlogs is not None:
            query = query.filter(func.coalesce(Student.backlogs, 0) <= criteria.max_backlogs)
        if criteria.eligible_branches:
            query = query.filter(Student.branch.in_(criteria.eligible_branches))
        if criteria.passing_year is not None:
            query = query.filter(Student.batch == criteria.passing_year)
        
        count = query.scalar() or 0
        set_cache(cache_key, count, ttl=settings.ELIGIBLE_COUNT_CACHE_TTL)
        logger.info("eligible_students_counted", window_id=window.id, count=count)
        return count
    
    def _validate_range(self, window: ApplicationWindow) -> None:
        if None in (window.start_date, window.end_date, window.start_time, window.end_time):
            raise ValidationError("Window start and end date and time are required")
        if window.start_instant >= window.end_instant:
            raise ValidationError(
                "Window start must be before its end",
                details={
                    "start": window.start_instant.isoformat(),
                    "end": window.end_instant.isoformat(),
                },
            )


window_registry = WindowRegistry()
