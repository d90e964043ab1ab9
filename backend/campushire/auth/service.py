"""
Authentication service layer

Credentials are handled by the campus identity provider. This service only
mints and resolves the bearer tokens that carry a user id.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy.orm import Session
from jose import jwt
import structlog

from campushire.core.config import settings
from campushire.models.user import User, Role

logger = structlog.get_logger()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def token_for_user(user: User, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token({"sub": str(user.id), "role": user.role}, expires_delta)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get user by email"""
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """Get user by ID"""
    return db.query(User).filter(User.id == user_id).first()


def create_user(
    db: Session,
    email: str,
    full_name: Optional[str] = None,
    role: Role = Role.RECRUITER,
) -> User:
    """Create an account mirrored from the identity provider"""
    if get_user_by_email(db, email):
        raise ValueError(f"User with email {email} already exists")
    
    user = User(email=email, full_name=full_name, role=Role(role).value)
    db.add(user)
    db.commit()
    db.refresh(user)
    
    logger.info("user_created", user_id=user.id, email=email, role=user.role)
    return user
