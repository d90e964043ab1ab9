"""
Review audit log

Every status or score mutation of an application appends exactly one row.
Rows are never updated or deleted; see the mapper listeners on the model.
"""
from typing import Any, List, Optional

from sqlalchemy.orm import Session
import structlog

from campushire.core.clock import utc_now
from campushire.models.review_history import ApplicationReviewHistory, ReviewType

logger = structlog.get_logger()


def classify(
    old_status: Optional[str],
    new_status: Optional[str],
    old_score: Optional[float],
    new_score: Optional[float],
) -> ReviewType:
    status_changed = old_status != new_status
    score_changed = old_score != new_score
    if status_changed and score_changed:
        return ReviewType.BOTH
    if score_changed:
        return ReviewType.SCORE_UPDATE
    return ReviewType.STATUS_CHANGE


class ReviewAuditLog:
    """Append-only ledger of application reviews"""
    
    def append(
        self,
        db: Session,
        application_id: int,
        reviewer_id: Optional[int],
        old_status: Optional[str],
        new_status: Optional[str],
        old_score: Optional[float],
        new_score: Optional[float],
        notes: Optional[str] = None,
    ) -> ApplicationReviewHistory:
        """Stage one history row in the caller's transaction"""
        entry = ApplicationReviewHistory(
            application_id=application_id,
            reviewer_id=reviewer_id,
            old_status=old_status,
            new_status=new_status,
            old_score=old_score,
            new_score=new_score,
            notes=notes,
            review_type=classify(old_status, new_status, old_score, new_score).value,
            reviewed_at=utc_now(),
        )
        db.add(entry)
        logger.info(
            "review_recorded",
            application_id=application_id,
            reviewer_id=reviewer_id,
            review_type=entry.review_type,
            old_status=old_status,
            new_status=new_status,
        )
        return entry
    
    def history_for_application(
        self,
        db: Session,
        application_id: int,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[ApplicationReviewHistory]:
        """Most recent first"""
        return self._page(
            db.query(ApplicationReviewHistory).filter(
                ApplicationReviewHistory.application_id == application_id
            ),
            skip,
            limit,
        )
    
    def history_for_reviewer(
        self,
        db: Session,
        reviewer_id: int,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[ApplicationReviewHistory]:
        """Most recent first"""
        return self._page(
            db.query(ApplicationReviewHistory).filter(
                ApplicationReviewHistory.reviewer_id == reviewer_id
            ),
            skip,
            limit,
        )
    
    def _page(self, query: Any, skip: int, limit: Optional[int]) -> List[ApplicationReviewHistory]:
        query = query.order_by(
            ApplicationReviewHistory.reviewed_at.desc(),
            ApplicationReviewHistory.id.desc(),
        ).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()


review_audit = ReviewAuditLog()
