"""
Pipeline planner

Pure functions that turn a requested change into an ordered list of
commands. Nothing here touches the database; invalid requests raise before
any command is produced.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

from campushire.core.exceptions import ValidationError
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
from campushire.pipeline.states import (
    ApplicationStatus,
    PipelineAction,
    apply_action,
    next_status,
)

APPLICATION_STATUS_EVENT = "application_status"

# Status changes students hear about
NOTIFIED_STATUSES = frozenset({
    ApplicationStatus.SHORTLISTED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.SELECTED,
})

MIN_SCORE = 0
MAX_SCORE = 100


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass(frozen=True)
class ApplicationSnapshot:
    id: int
    student_id: int
    opening_id: int
    status: ApplicationStatus
    score: Optional[float]
    current_round_id: Optional[int]
    submitted_at: Optional[datetime] = None
    
    @classmethod
    def of(cls, application: Any) -> "ApplicationSnapshot":
        return cls(
            id=application.id,
            student_id=application.student_id,
            opening_id=application.opening_id,
            status=ApplicationStatus(application.status),
            score=application.score,
            current_round_id=application.current_round_id,
            submitted_at=application.submitted_at,
        )


def validate_score(score: Optional[float]) -> Optional[float]:
    if score is None:
        return None
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ValidationError(
            f"Score must be between {MIN_SCORE} and {MAX_SCORE}",
            details={"score": score},
        )
    return float(score)


def _status_event(snapshot: ApplicationSnapshot, new_status: ApplicationStatus) -> Notify:
    return Notify(
        kind=APPLICATION_STATUS_EVENT,
        payload={
            "application_id": snapshot.id,
            "student_id": snapshot.student_id,
            "opening_id": snapshot.opening_id,
            "old_status": snapshot.status.value,
            "new_status": new_status.value,
        },
    )


def _status_commands(
    snapshot: ApplicationSnapshot,
    target: ApplicationStatus,
    entry_round_id: Optional[int],
) -> List[Command]:
    commands: List[Command] = []
    if target == ApplicationStatus.SHORTLISTED:
        # Shortlisting from the pool enters the first round; inside a round
        # it means the candidate passed that round and stays put
        if snapshot.current_round_id is None and entry_round_id is not None:
            commands += [ReserveSeat(entry_round_id), MoveToRound(entry_round_id)]
    elif target == ApplicationStatus.REJECTED:
        if snapshot.current_round_id is not None:
            commands.append(ReleaseSeat(snapshot.current_round_id))
    elif target == ApplicationStatus.SELECTED:
        commands.append(FinalizePlacement(snapshot.student_id, snapshot.opening_id))
    
    commands.append(SetStatus(target))
    if target in NOTIFIED_STATUSES:
        commands.append(_status_event(snapshot, target))
    return commands


def plan_review(
    snapshot: ApplicationSnapshot,
    new_status: Optional[ApplicationStatus] = None,
    new_score: Any = UNSET,
    entry_round_id: Optional[int] = None,
) -> List[Command]:
    """Commands for a recruiter status and/or score change.
    
    ``entry_round_id`` is the opening's first open round, used when a pooled
    application gets shortlisted. Pass ``new_score=None`` to clear a score;
    leave it UNSET to keep the current one.
    """
    if new_status is None and new_score is UNSET:
        raise ValidationError("Nothing to update: provide a status or a score")
    
    commands: List[Command] = []
    if new_status is not None:
        target = next_status(snapshot.status, ApplicationStatus(new_status))
        commands += _status_commands(snapshot, target, entry_round_id)
    if new_score is not UNSET:
        commands.insert(0, SetScore(validate_score(new_score)))
    return commands


def plan_add_candidate(snapshot: ApplicationSnapshot, round_id: int) -> List[Command]:
    """Seat an application in a round, shortlisting it if needed"""
    if snapshot.current_round_id == round_id:
        return []
    if snapshot.current_round_id is not None:
        raise ValidationError(
            "Application is already in another round",
            details={"current_round_id": snapshot.current_round_id},
        )
    
    commands: List[Command] = [ReserveSeat(round_id), MoveToRound(round_id)]
    if snapshot.status != ApplicationStatus.SHORTLISTED:
        target = apply_action(snapshot.status, PipelineAction.SHORTLIST)
        commands += [SetStatus(target), _status_event(snapshot, target)]
    return commands


def plan_remove_candidate(snapshot: ApplicationSnapshot, round_id: int) -> List[Command]:
    if snapshot.current_round_id != round_id:
        raise ValidationError(
            "Application is not in this round",
            details={"round_id": round_id, "current_round_id": snapshot.current_round_id},
        )
    target = apply_action(snapshot.status, PipelineAction.REJECT)
    return [
        ReleaseSeat(round_id),
        MoveToRound(None),
        SetStatus(target),
        _status_event(snapshot, target),
    ]


def plan_round_completion(
    candidates: Sequence[ApplicationSnapshot],
    next_round_id: Optional[int],
) -> List[Tuple[ApplicationSnapshot, List[Command]]]:
    """Per-candidate commands for closing a round.
    
    With a next round every shortlisted candidate moves there and starts
    over at submitted. Without one the round was final and each candidate
    is selected and placed.
    """
    plans = []
    for snapshot in sorted(candidates, key=candidate_order):
        if snapshot.status != ApplicationStatus.SHORTLISTED:
            continue
        if next_round_id is not None:
            target = apply_action(snapshot.status, PipelineAction.ADVANCE)
            commands: List[Command] = [
                ReserveSeat(next_round_id),
                MoveToRound(next_round_id),
                SetStatus(target),
            ]
        else:
            target = apply_action(snapshot.status, PipelineAction.SELECT)
            commands = [
                FinalizePlacement(snapshot.student_id, snapshot.opening_id),
                SetStatus(target),
                _status_event(snapshot, target),
            ]
        plans.append((snapshot, commands))
    return plans


def candidate_order(snapshot: ApplicationSnapshot) -> Tuple:
    """Sort key: score descending with unscored last, then earliest submission"""
    return (
        snapshot.score is None,
        -(snapshot.score or 0.0),
        snapshot.submitted_at,
        snapshot.id,
    )
