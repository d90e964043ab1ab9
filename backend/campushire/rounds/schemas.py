"""
Recruitment round Pydantic schemas
"""
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

from campushire.core.clock import to_campus_naive
from campushire.models.round import RoundStatus


class RoundCreate(BaseModel):
    """Round creation schema; an omitted round_number takes the next one"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    round_number: Optional[int] = Field(None, ge=1)
    scheduled_date: datetime
    location: Optional[str] = None
    is_online: bool = False
    meeting_link: Optional[str] = Field(None, max_length=500)
    instructions: Optional[str] = None
    max_candidates: Optional[int] = Field(None, ge=1)
    
    @field_validator("scheduled_date")
    @classmethod
    def scheduled_in_campus_time(cls, value: datetime) -> datetime:
        return to_campus_naive(value)


class RoundUpdate(BaseModel):
    """Partial update; only fields present in the request are changed"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    scheduled_date: Optional[datetime] = None
    location: Optional[str] = None
    is_online: Optional[bool] = None
    meeting_link: Optional[str] = Field(None, max_length=500)
    instructions: Optional[str] = None
    max_candidates: Optional[int] = Field(None, ge=1)
    
    @field_validator("scheduled_date")
    @classmethod
    def scheduled_in_campus_time(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_campus_naive(value) if value else value


class RoundStatusUpdate(BaseModel):
    status: RoundStatus


class CandidateAction(BaseModel):
    application_id: int
    notes: Optional[str] = Field(None, max_length=1000)


class RoundResponse(BaseModel):
    """Round response schema"""
    id: int
    opening_id: int
    name: str
    description: Optional[str]
    round_number: int
    scheduled_date: datetime
    status: str
    location: Optional[str]
    is_online: bool
    meeting_link: Optional[str]
    instructions: Optional[str]
    max_candidates: Optional[int]
    current_candidates: int
    
    class Config:
        from_attributes = True


class CompletionItem(BaseModel):
    application_id: int
    success: bool
    status: Optional[str] = None
    round_id: Optional[int] = None
    error: Optional[str] = None


class CompletionResponse(BaseModel):
    round_id: int
    next_round_id: Optional[int]
    results: List[CompletionItem]
