"""
Recruitment round routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from campushire.core.database import get_db
from campushire.auth.dependencies import get_current_active_user, require_staff
from campushire.applications.schemas import ApplicationResponse
from campushire.models.user import User
from campushire.rounds.sequencer import round_sequencer
from campushire.rounds.schemas import (
    CandidateAction,
    CompletionResponse,
    RoundCreate,
    RoundResponse,
    RoundStatusUpdate,
    RoundUpdate,
)

router = APIRouter(prefix="/api/v1", tags=["Recruitment Rounds"])


@router.post(
    "/openings/{opening_id}/rounds",
    response_model=RoundResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_round(
    opening_id: int,
    round_data: RoundCreate,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return round_sequencer.create_round(
        db, opening_id, round_data.model_dump(), created_by=current_user.id
    )


@router.get("/openings/{opening_id}/rounds", response_model=List[RoundResponse])
def list_rounds(
    opening_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return round_sequencer.list_rounds(db, opening_id)


@router.get("/rounds/{round_id}", response_model=RoundResponse)
def get_round(
    round_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return round_sequencer.get_round(db, round_id)


@router.patch("/rounds/{round_id}", response_model=RoundResponse)
def update_round(
    round_id: int,
    round_data: RoundUpdate,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Edit details, schedule or capacity of an unfinished round"""
    return round_sequencer.update_round(db, round_id, round_data.model_dump(exclude_unset=True))


@router.delete("/rounds/{round_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_round(
    round_id: int,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Delete an empty upcoming round; later rounds move up one number"""
    round_sequencer.delete_round(db, round_id)


@router.put("/rounds/{round_id}/status", response_model=RoundResponse)
def update_round_status(
    round_id: int,
    status_data: RoundStatusUpdate,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Start or cancel a round; completing it runs the completion sweep"""
    return round_sequencer.update_round_status(db, round_id, status_data.status, current_user.id)


@router.get("/rounds/{round_id}/candidates", response_model=List[ApplicationResponse])
def list_round_candidates(
    round_id: int,
    include_rejected: bool = False,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return round_sequencer.list_candidates(db, round_id, include_rejected=include_rejected)


@router.post("/rounds/{round_id}/candidates", response_model=ApplicationResponse)
def add_round_candidate(
    round_id: int,
    action: CandidateAction,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return round_sequencer.add_candidate(
        db, round_id, action.application_id, current_user.id, notes=action.notes
    )


@router.delete("/rounds/{round_id}/candidates/{application_id}", response_model=ApplicationResponse)
def remove_round_candidate(
    round_id: int,
    application_id: int,
    notes: Optional[str] = Query(None, max_length=1000),
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Drop a candidate from the round; the application is rejected"""
    return round_sequencer.remove_candidate(db, round_id, application_id, current_user.id, notes=notes)


@router.post("/rounds/{round_id}/complete", response_model=CompletionResponse)
def complete_round(
    round_id: int,
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Close the round and advance or select its shortlisted candidates"""
    return round_sequencer.complete_round(db, round_id, current_user.id)
