"""
Recruitment opening Pydantic schemas
"""
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

from campushire.core.clock import to_campus_naive
from campushire.models.opening import OpeningStatus


class OpeningBase(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    role_title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    application_deadline: datetime
    total_positions: int = Field(1, ge=1)
    min_cgpa: Optional[float] = Field(None, ge=0, le=10)
    max_backlogs: Optional[int] = Field(None, ge=0)
    eligible_branches: List[str] = Field(default_factory=list)
    passing_year: Optional[int] = None
    
    @field_validator("application_deadline")
    @classmethod
    def deadline_in_campus_time(cls, value: datetime) -> datetime:
        return to_campus_naive(value)


class OpeningCreate(OpeningBase):
    """Opening creation schema"""


class OpeningUpdate(BaseModel):
    """Opening update schema"""
    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    role_title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    application_deadline: Optional[datetime] = None
    total_positions: Optional[int] = Field(None, ge=1)
    min_cgpa: Optional[float] = Field(None, ge=0, le=10)
    max_backlogs: Optional[int] = Field(None, ge=0)
    eligible_branches: Optional[List[str]] = None
    passing_year: Optional[int] = None
    
    @field_validator("application_deadline")
    @classmethod
    def deadline_in_campus_time(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_campus_naive(value) if value else value


class OpeningStatusUpdate(BaseModel):
    status: OpeningStatus


class OpeningResponse(OpeningBase):
    """Opening response schema"""
    id: int
    status: str
    eligible_branches: Optional[List[str]] = None
    created_at: Optional[datetime]
    
    class Config:
        from_attributes = True
