"""
Notification Pydantic schemas
"""
from typing import Optional, Dict, Any
from pydantic import BaseModel
from datetime import datetime


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    message: str
    payload: Optional[Dict[str, Any]]
    is_read: bool
    created_at: Optional[datetime]
    
    class Config:
        from_attributes = True
