"""
Recruitment opening registry
"""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
import structlog

from campushire.core.exceptions import NotFoundError, ValidationError
from campushire.models.opening import OpeningStatus, RecruitmentOpening
from campushire.notifications.dispatcher import notification_dispatcher

logger = structlog.get_logger()

OPENING_FIELDS = (
    "company_name",
    "role_title",
    "description",
    "application_deadline",
    "total_positions",
    "min_cgpa",
    "max_backlogs",
    "eligible_branches",
    "passing_year",
)

REQUIRED_OPENING_FIELDS = frozenset({"company_name", "role_title", "application_deadline", "total_positions"})


class OpeningService:
    
    def get_opening(self, db: Session, opening_id: int) -> RecruitmentOpening:
        opening = db.query(RecruitmentOpening).filter(RecruitmentOpening.id == opening_id).first()
        if not opening:
            raise NotFoundError("Opening", opening_id)
        return opening
    
    def list_openings(
        self,
        db: Session,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[RecruitmentOpening]:
        query = db.query(RecruitmentOpening)
        if status is not None:
            query = query.filter(RecruitmentOpening.status == OpeningStatus(status).value)
        return (
            query.order_by(RecruitmentOpening.application_deadline, RecruitmentOpening.id)
            .offset(skip)
            .limit(limit)
            .all()
        )
    
    def create_opening(
        self,
        db: Session,
        data: Dict[str, Any],
        created_by: Optional[int] = None,
    ) -> RecruitmentOpening:
        """Create an opening and announce it to students"""
        opening = RecruitmentOpening(status=OpeningStatus.ACTIVE.value, created_by=created_by)
        for field in OPENING_FIELDS:
            if data.get(field) is not None:
                setattr(opening, field, data[field])
        if opening.eligible_branches is None:
            opening.eligible_branches = []
        
        db.add(opening)
        db.commit()
        db.refresh(opening)
        
        logger.info(
            "opening_created",
            opening_id=opening.id,
            company_name=opening.company_name,
            created_by=created_by,
        )
        notification_dispatcher.new_opening(opening.id)
        return opening
    
    def update_opening(self, db: Session, opening_id: int, data: Dict[str, Any]) -> RecruitmentOpening:
        cleared = sorted(field for field in REQUIRED_OPENING_FIELDS if field in data and data[field] is None)
        if cleared:
            raise ValidationError("Fields cannot be null", details={"fields": cleared})
        opening = self.get_opening(db, opening_id)
        for field in OPENING_FIELDS:
            if field in data:
                setattr(opening, field, data[field])
        db.commit()
        db.refresh(opening)
        
        logger.info("opening_updated", opening_id=opening_id, fields=sorted(data))
        return opening
    
    def update_status(self, db: Session, opening_id: int, status: OpeningStatus) -> RecruitmentOpening:
        opening = self.get_opening(db, opening_id)
        status = OpeningStatus(status)
        if opening.status == OpeningStatus.COMPLETED.value and status != OpeningStatus.COMPLETED:
            raise ValidationError("A completed opening cannot be reopened")
        opening.status = status.value
        db.commit()
        db.refresh(opening)
        
        logger.info("opening_status_updated", opening_id=opening_id, status=status.value)
        return opening


opening_service = OpeningService()
