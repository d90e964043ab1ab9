"""
Review history Pydantic schemas
"""
from typing import Optional
from pydantic import BaseModel
from datetime import datetime


class ReviewHistoryResponse(BaseModel):
    id: int
    application_id: int
    reviewer_id: Optional[int]
    old_status: Optional[str]
    new_status: Optional[str]
    old_score: Optional[float]
    new_score: Optional[float]
    notes: Optional[str]
    review_type: str
    reviewed_at: datetime
    
    class Config:
        from_attributes = True
