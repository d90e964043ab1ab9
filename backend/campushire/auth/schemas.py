"""
Authentication Pydantic schemas
"""
from typing import Optional
from pydantic import BaseModel
from datetime import datetime


class UserResponse(BaseModel):
    """User response schema"""
    id: int
    email: str
    full_name: Optional[str]
    role: str
    is_active: bool
    created_at: Optional[datetime]
    
    class Config:
        from_attributes = True
