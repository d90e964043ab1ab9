"""
Pipeline executor

Applies planned commands to one application inside the caller's
transaction. The caller commits, then hands the returned events to the
notification dispatcher.
"""
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session
import structlog

from campushire.core.clock import utc_now
from campushire.models.application import Application
from campushire.pipeline.commands import (
    Command,
    FinalizePlacement,
    MoveToRound,
    Notify,
    ReleaseSeat,
    ReserveSeat,
    SetScore,
    SetStatus,
)
from campushire.placements.finalizer import placement_finalizer
from campushire.reviews.audit import review_audit
from campushire.rounds import seats

logger = structlog.get_logger()


class PipelineExecutor:
    
    def execute(
        self,
        db: Session,
        application: Application,
        commands: Sequence[Command],
        reviewer_id: Optional[int] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[Notify]:
        old_status, old_score = application.status, application.score
        reviewed = False
        events: List[Notify] = []
        
        for command in commands:
            if isinstance(command, ReserveSeat):
                seats.reserve_seat(db, command.round_id)
            elif isinstance(command, ReleaseSeat):
                seats.release_seat(db, command.round_id)
            elif isinstance(command, MoveToRound):
                application.current_round_id = command.round_id
            elif isinstance(command, SetStatus):
                application.status = command.status.value
                reviewed = True
            elif isinstance(command, SetScore):
                application.score = command.score
                reviewed = True
            elif isinstance(command, FinalizePlacement):
                placement_finalizer.finalize(db, command.student_id, command.opening_id)
            elif isinstance(command, Notify):
                events.append(command)
            else:
                raise TypeError(f"Unknown pipeline command: {command!r}")
        
        if reviewed:
            application.reviewed_at = now or utc_now()
            application.reviewed_by = reviewer_id
            if notes is not None:
                application.notes = notes
            review_audit.append(
                db,
                application_id=application.id,
                reviewer_id=reviewer_id,
                old_status=old_status,
                new_status=application.status,
                old_score=old_score,
                new_score=application.score,
                notes=notes,
            )
        
        db.flush()
        logger.debug(
            "pipeline_commands_applied",
            application_id=application.id,
            commands=[type(command).__name__ for command in commands],
        )
        return events


pipeline_executor = PipelineExecutor()
