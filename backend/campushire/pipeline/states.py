"""
Application status machine
"""
import enum
from typing import Dict, Tuple

from campushire.core.exceptions import InvalidTransitionError


class ApplicationStatus(str, enum.Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under-review"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    SELECTED = "selected"
    
    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


class PipelineAction(str, enum.Enum):
    REVIEW = "review"
    SHORTLIST = "shortlist"
    REJECT = "reject"
    SELECT = "select"
    # Issued by the round sequencer only, never by a recruiter
    ADVANCE = "advance"


TERMINAL_STATUSES = frozenset({ApplicationStatus.REJECTED, ApplicationStatus.SELECTED})

TRANSITIONS: Dict[Tuple[ApplicationStatus, PipelineAction], ApplicationStatus] = {
    (ApplicationStatus.SUBMITTED, PipelineAction.REVIEW): ApplicationStatus.UNDER_REVIEW,
    (ApplicationStatus.SUBMITTED, PipelineAction.SHORTLIST): ApplicationStatus.SHORTLISTED,
    (ApplicationStatus.SUBMITTED, PipelineAction.REJECT): ApplicationStatus.REJECTED,
    (ApplicationStatus.UNDER_REVIEW, PipelineAction.SHORTLIST): ApplicationStatus.SHORTLISTED,
    (ApplicationStatus.UNDER_REVIEW, PipelineAction.REJECT): ApplicationStatus.REJECTED,
    (ApplicationStatus.SHORTLISTED, PipelineAction.REJECT): ApplicationStatus.REJECTED,
    (ApplicationStatus.SHORTLISTED, PipelineAction.SELECT): ApplicationStatus.SELECTED,
    (ApplicationStatus.SHORTLISTED, PipelineAction.ADVANCE): ApplicationStatus.SUBMITTED,
}

# Recruiter-facing targets; "submitted" is only reachable through ADVANCE
ACTION_FOR_TARGET: Dict[ApplicationStatus, PipelineAction] = {
    ApplicationStatus.UNDER_REVIEW: PipelineAction.REVIEW,
    ApplicationStatus.SHORTLISTED: PipelineAction.SHORTLIST,
    ApplicationStatus.REJECTED: PipelineAction.REJECT,
    ApplicationStatus.SELECTED: PipelineAction.SELECT,
}

# Bulk endpoint verbs
BULK_ACTIONS: Dict[str, ApplicationStatus] = {
    "shortlist": ApplicationStatus.SHORTLISTED,
    "reject": ApplicationStatus.REJECTED,
    "select": ApplicationStatus.SELECTED,
}


def apply_action(current: ApplicationStatus, action: PipelineAction) -> ApplicationStatus:
    """Return the status reached by ``action`` or raise InvalidTransitionError"""
    current = ApplicationStatus(current)
    target = TRANSITIONS.get((current, action))
    if target is None:
        raise InvalidTransitionError(current.value, action.value)
    return target


def next_status(current: ApplicationStatus, target: ApplicationStatus) -> ApplicationStatus:
    """Validate a recruiter-requested move from ``current`` to ``target``"""
    current = ApplicationStatus(current)
    target = ApplicationStatus(target)
    action = ACTION_FOR_TARGET.get(target)
    if action is None or TRANSITIONS.get((current, action)) != target:
        raise InvalidTransitionError(current.value, target.value)
    return target
