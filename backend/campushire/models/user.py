"""
User account model
"""
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from campushire.core.database import Base


class Role(str, enum.Enum):
    ADMIN = "admin"
    RECRUITER = "recruiter"
    STUDENT = "student"


class User(Base):
    """Acting account. Credentials live with the external auth provider."""
    
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255))
    role = Column(String(20), nullable=False, default=Role.STUDENT.value)
    is_active = Column(Boolean, default=True, nullable=False)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
