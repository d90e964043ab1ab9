"""
Application window Pydantic schemas
"""
from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import date, time, datetime


class WindowCreate(BaseModel):
    """Window creation schema; dates and times are campus local time"""
    start_date: date
    end_date: date
    start_time: time = time(0, 0)
    end_time: time = time(23, 59)
    description: Optional[str] = None
    min_cgpa: Optional[float] = Field(None, ge=0, le=10)
    max_backlogs: Optional[int] = Field(None, ge=0)
    eligible_branches: Optional[List[str]] = None
    passing_year: Optional[int] = None
    is_active: bool = True


class WindowUpdate(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    description: Optional[str] = None
    min_cgpa: Optional[float] = Field(None, ge=0, le=10)
    max_backlogs: Optional[int] = Field(None, ge=0)
    eligible_branches: Optional[List[str]] = None
    passing_year: Optional[int] = None
    is_active: Optional[bool] = None


class WindowResponse(BaseModel):
    """Window response schema"""
    id: int
    opening_id: int
    description: Optional[str]
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    min_cgpa: Optional[float]
    max_backlogs: Optional[int]
    eligible_branches: Optional[List[str]]
    passing_year: Optional[int]
    is_active: bool
    created_at: Optional[datetime]
    
    class Config:
        from_attributes = True


class EligibleCountResponse(BaseModel):
    window_id: int
    eligible_students: int
