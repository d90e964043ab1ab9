"""
Custom exception classes for the application
"""
from typing import Optional, Dict, Any


class CampusHireException(Exception):
    """Base exception for CampusHire"""
    
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(CampusHireException):
    """Authentication related errors"""
    
    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=401, details=details)


class AuthorizationError(CampusHireException):
    """Authorization/permission errors"""
    
    def __init__(self, message: str = "Insufficient permissions", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=403, details=details)


class NotFoundError(CampusHireException):
    """Resource not found errors"""
    
    def __init__(self, resource: str, identifier: Optional[Any] = None):
        message = f"{resource} not found"
        if identifier is not None:
            message += f": {identifier}"
        super().__init__(message, status_code=404)


class ValidationError(CampusHireException):
    """Validation errors"""
    
    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=422, details=details)


class IneligibleError(ValidationError):
    """Student failed an eligibility check when applying"""
    
    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(reason, details=details)
        self.reason = reason


class InvalidTransitionError(ValidationError):
    """Requested status change is not allowed from the current status"""
    
    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot change status from {current} to {target}",
            details={"current_status": current, "requested_status": target},
        )


class ConflictError(CampusHireException):
    """A concurrent writer won the race; the caller may retry"""
    
    def __init__(self, message: str = "Conflicting update", details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        details.setdefault("retryable", True)
        super().__init__(message, status_code=409, details=details)
