"""
Authentication dependencies for FastAPI routes
"""
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
import structlog

from campushire.core.database import get_db
from campushire.core.config import settings
from campushire.core.exceptions import AuthenticationError, AuthorizationError
from campushire.models.user import User
from campushire.auth.service import get_user_by_id

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Get current authenticated user from JWT token
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    try:
        payload = jwt.decode(
            credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        subject = payload.get("sub")
        if subject is None:
            raise AuthenticationError("Invalid token")
        user_id = int(subject)
    except (JWTError, ValueError):
        raise AuthenticationError("Invalid token")
    
    user = get_user_by_id(db, user_id)
    if user is None:
        raise AuthenticationError("User not found")
    
    if not user.is_active:
        raise AuthenticationError("User is inactive")
    
    return user


def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Get current active user"""
    return current_user


def require_role(role_name: str):
    """
    Dependency factory for role-based access control
    Usage: @router.get("/admin", dependencies=[Depends(require_role("admin"))])
    """
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != role_name:
            logger.warning(
                "unauthorized_access_attempt",
                user_id=current_user.id,
                required_role=role_name,
                user_role=current_user.role,
            )
            raise AuthorizationError(
                f"Requires {role_name} role",
                details={"required_role": role_name, "user_role": current_user.role},
            )
        return current_user
    
    return role_checker


def require_any_role(*role_names: str):
    """
    Dependency factory for requiring any of the specified roles
    """
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in role_names:
            logger.warning(
                "unauthorized_access_attempt",
                user_id=current_user.id,
                required_roles=list(role_names),
                user_role=current_user.role,
            )
            raise AuthorizationError(
                f"Requires one of: {', '.join(role_names)}",
                details={"required_roles": list(role_names), "user_role": current_user.role},
            )
        return current_user
    
    return role_checker


# Staff who may drive the pipeline
require_staff = require_any_role("admin", "recruiter")
