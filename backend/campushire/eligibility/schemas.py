"""
Eligibility Pydantic schemas
"""
from typing import Optional, List
from pydantic import BaseModel, Field


class EligibilityResponse(BaseModel):
    student_id: int
    opening_id: int
    eligible: bool
    reason: Optional[str] = None


class BulkEligibilityRequest(BaseModel):
    student_ids: List[int] = Field(..., min_length=1)
    opening_ids: List[int] = Field(..., min_length=1)


class OpeningEligibility(BaseModel):
    opening_id: int
    company_name: str
    reason: Optional[str] = None


class StudentEligibility(BaseModel):
    student_id: int
    eligible: List[OpeningEligibility] = Field(default_factory=list)
    ineligible: List[OpeningEligibility] = Field(default_factory=list)
    error: Optional[str] = None
