"""
Student model
"""
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from campushire.core.database import Base


class Student(Base):
    """Student academic record and placement state"""
    
    __tablename__ = "students"
    __table_args__ = (
        CheckConstraint("backlogs >= 0", name="ck_student_backlogs_non_negative"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=True)
    roll_number = Column(String(50), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255))
    
    # Academic record
    branch = Column(String(100), nullable=False, index=True)
    batch = Column(Integer, nullable=False, index=True)  # graduation year
    cgpa = Column(Float)  # 0-10
    backlogs = Column(Integer, default=0)
    
    # Placement, written only by the placement finalizer
    placed = Column(Boolean, default=False, nullable=False, index=True)
    placed_opening_id = Column(Integer, ForeignKey("recruitment_openings.id"), nullable=True)
    placed_at = Column(DateTime(timezone=True))
    
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    user = relationship("User")
    placed_opening = relationship("RecruitmentOpening", foreign_keys=[placed_opening_id])
    applications = relationship("Application", back_populates="student")
