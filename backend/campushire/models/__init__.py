"""
Database models
"""
from campushire.models.user import User, Role
from campushire.models.student import Student
from campushire.models.opening import RecruitmentOpening, OpeningStatus
from campushire.models.window import ApplicationWindow
from campushire.models.round import RecruitmentRound, RoundStatus
from campushire.models.application import Application
from campushire.models.review_history import ApplicationReviewHistory, ReviewType
from campushire.models.notification import Notification

__all__ = [
    "User",
    "Role",
    "Student",
    "RecruitmentOpening",
    "OpeningStatus",
    "ApplicationWindow",
    "RecruitmentRound",
    "RoundStatus",
    "Application",
    "ApplicationReviewHistory",
    "ReviewType",
    "Notification",
]
