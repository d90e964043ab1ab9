"""
Application window model
"""
from datetime import datetime
from sqlalchemy import Column, Integer, Float, Boolean, Date, Time, DateTime, ForeignKey, JSON, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from campushire.core.database import Base


class ApplicationWindow(Base):
    """Time-boxed eligibility gate for one opening.
    
    Dates and times are campus local time. The window is open while
    ``start_date + start_time <= now <= end_date + end_time``, the end bound
    covering the whole final minute.
    """
    
    __tablename__ = "application_windows"
    
    id = Column(Integer, primary_key=True, index=True)
    opening_id = Column(Integer, ForeignKey("recruitment_openings.id"), nullable=False, index=True)
    description = Column(Text)
    
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    
    # Criteria; None falls back to the opening defaults
    min_cgpa = Column(Float)
    max_backlogs = Column(Integer)
    eligible_branches = Column(JSON)
    passing_year = Column(Integer)
    
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    
    created_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    opening = relationship("RecruitmentOpening", back_populates="windows")
    
    @property
    def start_instant(self) -> datetime:
        return datetime.combine(self.start_date, self.start_time.replace(second=0, microsecond=0))
    
    @property
    def end_instant(self) -> datetime:
        return datetime.combine(self.end_date, self.end_time.replace(second=59, microsecond=999999))
    
    def is_open(self, now: datetime) -> bool:
        return bool(self.is_active) and self.start_instant <= now <= self.end_instant
