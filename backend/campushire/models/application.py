"""
Application model
"""
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, ForeignKey, JSON,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from campushire.core.clock import utc_now
from campushire.core.database import Base
from campushire.pipeline.states import ApplicationStatus


class Application(Base):
    """One student's application to one opening"""
    
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("student_id", "opening_id", name="uq_application_student_opening"),
        CheckConstraint("score IS NULL OR (score >= 0 AND score <= 100)", name="ck_application_score_range"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    opening_id = Column(Integer, ForeignKey("recruitment_openings.id"), nullable=False, index=True)
    current_round_id = Column(Integer, ForeignKey("recruitment_rounds.id"), nullable=True, index=True)
    
    status = Column(String(20), nullable=False, default=ApplicationStatus.SUBMITTED.value, index=True)
    score = Column(Float)
    notes = Column(String(1000))
    
    # Snapshot of the submitted form, never rewritten
    form_data = Column(JSON, default=dict)
    resume_url = Column(String(500))
    
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    reviewed_at = Column(DateTime(timezone=True))
    reviewed_by = Column(Integer, ForeignKey("users.id"))
    
    student = relationship("Student", back_populates="applications")
    opening = relationship("RecruitmentOpening", back_populates="applications")
    current_round = relationship("RecruitmentRound", back_populates="applications")
    history = relationship(
        "ApplicationReviewHistory",
        back_populates="application",
        order_by="ApplicationReviewHistory.id",
    )
