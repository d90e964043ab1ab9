"""
Recruitment round model
"""
import enum
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, ForeignKey,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from campushire.core.database import Base


class RoundStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Rounds that still accept candidates
OPEN_ROUND_STATUSES = (RoundStatus.UPCOMING.value, RoundStatus.ONGOING.value)


class RecruitmentRound(Base):
    """One ordered stage of an opening's pipeline"""
    
    __tablename__ = "recruitment_rounds"
    __table_args__ = (
        UniqueConstraint("opening_id", "round_number", name="uq_round_opening_number"),
        CheckConstraint("current_candidates >= 0", name="ck_round_occupancy_non_negative"),
        CheckConstraint(
            "max_candidates IS NULL OR current_candidates <= max_candidates",
            name="ck_round_occupancy_capacity",
        ),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    opening_id = Column(Integer, ForeignKey("recruitment_openings.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    round_number = Column(Integer, nullable=False)  # 1-based
    scheduled_date = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False, default=RoundStatus.UPCOMING.value)
    
    location = Column(String(255))
    is_online = Column(Boolean, default=False)
    meeting_link = Column(String(500))
    instructions = Column(Text)
    
    # Counter only moves through atomic UPDATEs in rounds.seats
    max_candidates = Column(Integer)
    current_candidates = Column(Integer, nullable=False, default=0)
    
    created_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    opening = relationship("RecruitmentOpening", back_populates="rounds")
    applications = relationship("Application", back_populates="current_round")
