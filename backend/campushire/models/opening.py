"""
Recruitment opening model
"""
import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from campushire.core.database import Base


class OpeningStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    COMPLETED = "completed"


class RecruitmentOpening(Base):
    """A company's recruitment campaign"""
    
    __tablename__ = "recruitment_openings"
    __table_args__ = (
        CheckConstraint("total_positions >= 1", name="ck_opening_positions_positive"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String(255), nullable=False, index=True)
    role_title = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default=OpeningStatus.ACTIVE.value, index=True)
    application_deadline = Column(DateTime, nullable=False)  # campus local time
    total_positions = Column(Integer, nullable=False, default=1)
    
    # Default eligibility, overridden per window
    min_cgpa = Column(Float)
    max_backlogs = Column(Integer)
    eligible_branches = Column(JSON, default=list)
    passing_year = Column(Integer)
    
    created_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    windows = relationship("ApplicationWindow", back_populates="opening")
    rounds = relationship(
        "RecruitmentRound",
        back_populates="opening",
        order_by="RecruitmentRound.round_number",
    )
    applications = relationship("Application", back_populates="opening")
    
    def is_application_open(self, now: datetime) -> bool:
        return self.status == OpeningStatus.ACTIVE.value and now <= self.application_deadline
