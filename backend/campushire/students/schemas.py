"""
Student Pydantic schemas
"""
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime


class StudentCreate(BaseModel):
    roll_number: str = Field(..., min_length=1, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = None
    branch: str = Field(..., min_length=1, max_length=100)
    batch: int
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    backlogs: int = Field(0, ge=0)
    user_id: Optional[int] = None


class StudentUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = None
    branch: Optional[str] = Field(None, min_length=1, max_length=100)
    batch: Optional[int] = None
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    backlogs: Optional[int] = Field(None, ge=0)


class StudentResponse(BaseModel):
    id: int
    user_id: Optional[int]
    roll_number: str
    full_name: str
    email: Optional[str]
    branch: str
    batch: int
    cgpa: Optional[float]
    backlogs: Optional[int]
    placed: bool
    placed_opening_id: Optional[int]
    placed_at: Optional[datetime]
    
    class Config:
        from_attributes = True
