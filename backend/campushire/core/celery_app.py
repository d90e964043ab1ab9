"""
Celery application for post-commit side effects (notifications)
"""
from celery import Celery
from campushire.core.config import settings

celery_app = Celery(
    "campushire",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["campushire.tasks.notification_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.CAMPUS_TIMEZONE,
    enable_utc=True,
    task_time_limit=60,
    task_soft_time_limit=45,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_ignore_result=True,
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_eager_propagates=False,
)
