"""
Application Pydantic schemas
"""
from typing import Optional, List, Dict, Any, Literal
from pydantic import BaseModel, Field, model_validator
from datetime import datetime

from campushire.pipeline.states import ApplicationStatus


class FormData(BaseModel):
    """Snapshot of the student's application form"""
    personal_info: Dict[str, Any] = Field(default_factory=dict)
    academic_info: Dict[str, Any] = Field(default_factory=dict)
    project_details: List[Dict[str, Any]] = Field(default_factory=list)
    experience_details: List[Dict[str, Any]] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    achievements: List[str] = Field(default_factory=list)
    additional_info: Optional[str] = None


class ApplicationCreate(BaseModel):
    opening_id: int
    form_data: FormData = Field(default_factory=FormData)
    resume_url: Optional[str] = Field(None, max_length=500)
    # Staff applying on a student's behalf
    student_id: Optional[int] = None


class StatusUpdate(BaseModel):
    status: ApplicationStatus
    notes: Optional[str] = Field(None, max_length=1000)


class ScoreUpdate(BaseModel):
    score: Optional[float] = Field(..., ge=0, le=100)
    notes: Optional[str] = Field(None, max_length=1000)


class ReviewUpdate(BaseModel):
    """Status and/or score in one review; an omitted score is left as is"""
    status: Optional[ApplicationStatus] = None
    score: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = Field(None, max_length=1000)
    
    @model_validator(mode="after")
    def needs_change(self):
        if self.status is None and "score" not in self.model_fields_set:
            raise ValueError("Provide a status or a score")
        return self


class BulkUpdate(BaseModel):
    application_ids: List[int] = Field(..., min_length=1)
    action: Optional[Literal["shortlist", "reject", "select"]] = None
    score: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = Field(None, max_length=1000)
    
    @model_validator(mode="after")
    def needs_change(self):
        if self.action is None and "score" not in self.model_fields_set:
            raise ValueError("Provide an action or a score")
        return self


class BulkItemResult(BaseModel):
    application_id: int
    success: bool
    status: Optional[str] = None
    score: Optional[float] = None
    error: Optional[str] = None


class ApplicationResponse(BaseModel):
    """Application response schema"""
    id: int
    student_id: int
    opening_id: int
    current_round_id: Optional[int]
    status: str
    score: Optional[float]
    notes: Optional[str]
    resume_url: Optional[str]
    submitted_at: datetime
    reviewed_at: Optional[datetime]
    reviewed_by: Optional[int]
    
    class Config:
        from_attributes = True


class ApplicationDetailResponse(ApplicationResponse):
    form_data: Optional[Dict[str, Any]]
