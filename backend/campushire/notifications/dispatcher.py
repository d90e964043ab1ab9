"""
Notification dispatcher

Hands pipeline events to Celery after the owning transaction commits.
Delivery is best-effort: a broker failure is logged and never undoes or
fails the recruiter's action.
"""
from typing import Iterable

import structlog

from campushire.core.config import settings
from campushire.pipeline.commands import Notify
from campushire.pipeline.planner import APPLICATION_STATUS_EVENT

logger = structlog.get_logger()

NEW_OPENING_EVENT = "new_opening"


class NotificationDispatcher:
    
    def dispatch(self, events: Iterable[Notify]) -> int:
        """Enqueue each event; returns how many were handed to the broker"""
        if not settings.NOTIFICATIONS_ENABLED:
            return 0
        
        # Imported late so the task module can import services freely
        from campushire.tasks.notification_tasks import (
            notify_application_status_task,
            notify_new_opening_task,
        )
        
        tasks = {
            APPLICATION_STATUS_EVENT: lambda payload: notify_application_status_task.delay(payload),
            NEW_OPENING_EVENT: lambda payload: notify_new_opening_task.delay(payload["opening_id"]),
        }
        
        sent = 0
        for event in events:
            task = tasks.get(event.kind)
            if task is None:
                logger.warning("notification_kind_unknown", kind=event.kind)
                continue
            try:
                task(event.payload)
                sent += 1
            except Exception as e:
                logger.error(
                    "notification_dispatch_failed",
                    kind=event.kind,
                    payload=event.payload,
                    error=str(e),
                )
        return sent
    
    def new_opening(self, opening_id: int) -> int:
        return self.dispatch([Notify(kind=NEW_OPENING_EVENT, payload={"opening_id": opening_id})])


notification_dispatcher = NotificationDispatcher()
