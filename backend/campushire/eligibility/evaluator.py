"""
Eligibility evaluator

Pure decision function: no database access, no clock reads, no mutation.
Callers resolve the window, the opening defaults and the already-applied
flag and pass them in together with ``now``.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Tuple

WINDOW_NOT_OPEN = "Application window is not open"
ALREADY_PLACED = "Student is already placed"
BRANCH_NOT_ELIGIBLE = "Your branch is not eligible"
ALREADY_APPLIED = "You have already applied to this company"


@dataclass(frozen=True)
class EligibilityCriteria:
    min_cgpa: Optional[float] = None
    max_backlogs: Optional[int] = None
    eligible_branches: Tuple[str, ...] = ()
    passing_year: Optional[int] = None


@dataclass(frozen=True)
class EligibilityResult:
    eligible: bool
    reason: Optional[str] = None
    
    @classmethod
    def admit(cls) -> "EligibilityResult":
        return cls(eligible=True)
    
    @classmethod
    def deny(cls, reason: str) -> "EligibilityResult":
        return cls(eligible=False, reason=reason)


def _pick(override: Any, default: Any) -> Any:
    return default if override is None else override


def resolve_criteria(window: Any, opening: Any = None) -> EligibilityCriteria:
    """Window criteria, each falling back to the opening default when unset"""
    branches = _pick(
        getattr(window, "eligible_branches", None),
        getattr(opening, "eligible_branches", None),
    )
    return EligibilityCriteria(
        min_cgpa=_pick(getattr(window, "min_cgpa", None), getattr(opening, "min_cgpa", None)),
        max_backlogs=_pick(getattr(window, "max_backlogs", None), getattr(opening, "max_backlogs", None)),
        eligible_branches=tuple(branches or ()),
        passing_year=_pick(getattr(window, "passing_year", None), getattr(opening, "passing_year", None)),
    )


def check_academics(student: Any, criteria: EligibilityCriteria) -> Optional[str]:
    """Academic checks in order; returns the first failing reason or None.
    
    A missing cgpa or backlog count is read as 0.
    """
    cgpa = student.cgpa or 0.0
    backlogs = student.backlogs or 0
    
    if criteria.min_cgpa is not None and cgpa < criteria.min_cgpa:
        return f"Minimum CGPA required is {float(criteria.min_cgpa)}"
    if criteria.max_backlogs is not None and backlogs > criteria.max_backlogs:
        return f"Maximum backlogs allowed is {int(criteria.max_backlogs)}"
    if criteria.eligible_branches and student.branch not in criteria.eligible_branches:
        return BRANCH_NOT_ELIGIBLE
    if criteria.passing_year is not None and student.batch != criteria.passing_year:
        return f"Only {int(criteria.passing_year)} batch students are eligible"
    return None


def evaluate(
    student: Any,
    window: Any,
    now: datetime,
    already_applied: bool = False,
    opening: Any = None,
) -> EligibilityResult:
    """Decide whether ``student`` may apply through ``window`` at ``now``.
    
    ``window`` is the matching application window, or None when the opening
    has none. ``opening`` supplies default criteria for anything the window
    leaves unset. Checks short-circuit in this order: window open, not
    placed, cgpa, backlogs, branch, batch, not already applied.
    """
    if window is None or not window.is_open(now):
        return EligibilityResult.deny(WINDOW_NOT_OPEN)
    
    if student.placed:
        return EligibilityResult.deny(ALREADY_PLACED)
    
    reason = check_academics(student, resolve_criteria(window, opening))
    if reason:
        return EligibilityResult.deny(reason)
    
    if already_applied:
        return EligibilityResult.deny(ALREADY_APPLIED)
    
    return EligibilityResult.admit()

