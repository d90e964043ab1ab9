"""
Authentication routes
"""
from fastapi import APIRouter, Depends

from campushire.auth.dependencies import get_current_active_user
from campushire.auth.schemas import UserResponse
from campushire.models.user import User

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_active_user)):
    """Profile of the authenticated account"""
    return current_user
