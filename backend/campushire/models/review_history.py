"""
Append-only review audit model
"""
import enum
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, event
from sqlalchemy.orm import relationship
from campushire.core.clock import utc_now
from campushire.core.database import Base
from campushire.core.exceptions import ValidationError


class ReviewType(str, enum.Enum):
    STATUS_CHANGE = "status_change"
    SCORE_UPDATE = "score_update"
    BOTH = "both"


class ApplicationReviewHistory(Base):
    """One row per status or score mutation of an application"""
    
    __tablename__ = "application_review_history"
    
    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("applications.id"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    
    old_status = Column(String(20))
    new_status = Column(String(20))
    old_score = Column(Float)
    new_score = Column(Float)
    notes = Column(String(1000))
    review_type = Column(String(20), nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    
    application = relationship("Application", back_populates="history")
    reviewer = relationship("User")


@event.listens_for(ApplicationReviewHistory, "before_update")
def _refuse_update(mapper, connection, target):
    raise ValidationError("Review history is append-only", details={"history_id": target.id})


@event.listens_for(ApplicationReviewHistory, "before_delete")
def _refuse_delete(mapper, connection, target):
    raise ValidationError("Review history is append-only", details={"history_id": target.id})
