"""
Side-effect commands produced by the planner and applied by the executor
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from campushire.pipeline.states import ApplicationStatus


@dataclass(frozen=True)
class SetStatus:
    status: ApplicationStatus


@dataclass(frozen=True)
class SetScore:
    score: Optional[float]


@dataclass(frozen=True)
class ReserveSeat:
    round_id: int


@dataclass(frozen=True)
class ReleaseSeat:
    round_id: int


@dataclass(frozen=True)
class MoveToRound:
    round_id: Optional[int]


@dataclass(frozen=True)
class FinalizePlacement:
    student_id: int
    opening_id: int


@dataclass(frozen=True)
class Notify:
    kind: str
    payload: Dict[str, Any] = field(default_factory=dict)


Command = Union[SetStatus, SetScore, ReserveSeat, ReleaseSeat, MoveToRound, FinalizePlacement, Notify]
