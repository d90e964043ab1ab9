"""
Round sequencer

Ordered rounds per opening. Candidates enter through an atomic seat
reservation, leave through rejection, and move forward or get selected when
a round is completed.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import structlog

from campushire.core.clock import campus_now
from campushire.core.exceptions import (
    CampusHireException,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from campushire.models.application import Application
from campushire.models.opening import RecruitmentOpening
from campushire.models.round import OPEN_ROUND_STATUSES, RecruitmentRound, RoundStatus
from campushire.notifications.dispatcher import notification_dispatcher
from campushire.pipeline.executor import pipeline_executor
from campushire.pipeline.planner import (
    ApplicationSnapshot,
    plan_add_candidate,
    plan_remove_candidate,
    plan_round_completion,
)
from campushire.pipeline.states import ApplicationStatus
from campushire.rounds import seats

logger = structlog.get_logger()

ROUND_FIELDS = (
    "name",
    "description",
    "scheduled_date",
    "location",
    "is_online",
    "meeting_link",
    "instructions",
    "max_candidates",
)

REQUIRED_ROUND_FIELDS = frozenset({"name", "scheduled_date", "is_online"})

# Manual status moves; completion goes through complete_round
ROUND_STATUS_MOVES = {
    RoundStatus.UPCOMING: {RoundStatus.ONGOING, RoundStatus.CANCELLED},
    RoundStatus.ONGOING: {RoundStatus.CANCELLED},
}


def _candidate_query(db: Session, round_id: int):
    return (
        db.query(Application)
        .filter(Application.current_round_id == round_id)
        .order_by(
            Application.score.is_(None),
            Application.score.desc(),
            Application.submitted_at,
            Application.id,
        )
    )


class RoundSequencer:
    
    def get_round(self, db: Session, round_id: int) -> RecruitmentRound:
        recruitment_round = db.query(RecruitmentRound).filter(RecruitmentRound.id == round_id).first()
        if not recruitment_round:
            raise NotFoundError("Round", round_id)
        return recruitment_round
    
    def list_rounds(self, db: Session, opening_id: int) -> List[RecruitmentRound]:
        return (
            db.query(RecruitmentRound)
            .filter(RecruitmentRound.opening_id == opening_id)
            .order_by(RecruitmentRound.round_number)
            .all()
        )
    
    def next_round(self, db: Session, recruitment_round: RecruitmentRound) -> Optional[RecruitmentRound]:
        """Lowest-numbered non-cancelled round after this one"""
        return (
            db.query(RecruitmentRound)
            .filter(
                RecruitmentRound.opening_id == recruitment_round.opening_id,
                RecruitmentRound.round_number > recruitment_round.round_number,
                RecruitmentRound.status != RoundStatus.CANCELLED.value,
            )
            .order_by(RecruitmentRound.round_number)
            .first()
        )
    
    def create_round(
        self,
        db: Session,
        opening_id: int,
        data: Dict[str, Any],
        created_by: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> RecruitmentRound:
        """
        Add a round to an opening.
        
        Round numbers are contiguous from 1: an omitted number takes the next
        free one, and a given number must be exactly that.
        """
        opening = db.query(RecruitmentOpening).filter(RecruitmentOpening.id == opening_id).first()
        if not opening:
            raise NotFoundError("Opening", opening_id)
        
        highest = (
            db.query(func.max(RecruitmentRound.round_number))
            .filter(RecruitmentRound.opening_id == opening_id)
            .scalar()
            or 0
        )
        round_number = data.get("round_number") or highest + 1
        if round_number <= highest:
            raise ValidationError(f"Round {round_number} already exists for this company")
        if round_number != highest + 1:
            raise ValidationError(
                f"Round numbers must be contiguous; the next round is {highest + 1}",
                details={"round_number": round_number},
            )
        
        scheduled_date = data.get("scheduled_date")
        if scheduled_date is None:
            raise ValidationError("Scheduled date is required")
        if scheduled_date <= (now or campus_now()):
            raise ValidationError("Scheduled date must be in the future")
        
        recruitment_round = RecruitmentRound(
            opening_id=opening_id,
            round_number=round_number,
            status=RoundStatus.UPCOMING.value,
            current_candidates=0,
            created_by=created_by,
        )
        for field in ROUND_FIELDS:
            if data.get(field) is not None:
                setattr(recruitment_round, field, data[field])
        
        db.add(recruitment_round)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(
                f"Round {round_number} already exists for this company",
                details={"opening_id": opening_id, "round_number": round_number},
            )
        db.refresh(recruitment_round)
        
        logger.info(
            "round_created",
            round_id=recruitment_round.id,
            opening_id=opening_id,
            round_number=round_number,
        )
        return recruitment_round
    
    def update_round_status(
        self,
        db: Session,
        round_id: int,
        new_status: RoundStatus,
        actor_id: Optional[int] = None,
    ) -> RecruitmentRound:
        recruitment_round = self.get_round(db, round_id)
        new_status = RoundStatus(new_status)
        if new_status == RoundStatus.COMPLETED:
            self.complete_round(db, round_id, actor_id)
            return self.get_round(db, round_id)
        
        current = RoundStatus(recruitment_round.status)
        if new_status not in ROUND_STATUS_MOVES.get(current, set()):
            raise ValidationError(
                f"Cannot change round status from {current.value} to {new_status.value}"
            )
        recruitment_round.status = new_status.value
        db.commit()
        db.refresh(recruitment_round)
        
        logger.info("round_status_updated", round_id=round_id, status=new_status.value)
        return recruitment_round
    
    def update_round(
        self,
        db: Session,
        round_id: int,
        data: Dict[str, Any],
        now: Optional[datetime] = None,
    ) -> RecruitmentRound:
        """
        Edit details, schedule or capacity of a round that is not finished.
        
        ``max_candidates`` may be cleared (no limit) but never set below the
        seats already taken.
        """
        recruitment_round = self.get_round(db, round_id)
        if recruitment_round.status not in OPEN_ROUND_STATUSES:
            raise ValidationError(f"Round is {recruitment_round.status}")
        cleared = sorted(field for field in REQUIRED_ROUND_FIELDS if field in data and data[field] is None)
        if cleared:
            raise ValidationError("Fields cannot be null", details={"fields": cleared})
        scheduled_date = data.get("scheduled_date")
        if scheduled_date is not None and scheduled_date <= (now or campus_now()):
            raise ValidationError("Scheduled date must be in the future")
        
        for field in ROUND_FIELDS:
            if field in data and field != "max_candidates":
                setattr(recruitment_round, field, data[field])
        try:
            db.flush()
            if "max_candidates" in data:
                seats.set_capacity(db, round_id, data["max_candidates"])
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(recruitment_round)
        
        logger.info("round_updated", round_id=round_id, fields=sorted(data))
        return recruitment_round
    
    def delete_round(self, db: Session, round_id: int) -> None:
        """
        Delete an upcoming round nobody has entered, closing the gap in the
        numbering by moving every later round down by one.
        """
        recruitment_round = self.get_round(db, round_id)
        if recruitment_round.status != RoundStatus.UPCOMING.value:
            raise ValidationError("Only upcoming rounds can be deleted")
        in_round = (
            db.query(func.count(Application.id))
            .filter(Application.current_round_id == round_id)
            .scalar()
        )
        if in_round:
            raise ValidationError(
                "Round still has candidates",
                details={"round_id": round_id, "applications": in_round},
            )
        
        opening_id = recruitment_round.opening_id
        round_number = recruitment_round.round_number
        try:
            db.delete(recruitment_round)
            db.flush()
            later = (
                db.query(RecruitmentRound)
                .filter(
                    RecruitmentRound.opening_id == opening_id,
                    RecruitmentRound.round_number > round_number,
                )
                .order_by(RecruitmentRound.round_number)
                .all()
            )
            # One at a time, lowest first, so (opening, number) stays unique
            for following in later:
                following.round_number -= 1
                db.flush()
            db.commit()
        except Exception:
            db.rollback()
            raise
        
        logger.info(
            "round_deleted",
            round_id=round_id,
            opening_id=opening_id,
            round_number=round_number,
            renumbered=len(later),
        )
    
    def list_candidates(
        self,
        db: Session,
        round_id: int,
        include_rejected: bool = False,
    ) -> List[Application]:
        """Candidates by score, highest first, then by submission time"""
        self.get_round(db, round_id)
        query = _candidate_query(db, round_id)
        if not include_rejected:
            query = query.filter(Application.status != ApplicationStatus.REJECTED.value)
        return query.all()
    
    def _run(
        self,
        db: Session,
        application: Application,
        commands: List[Any],
        actor_id: Optional[int],
        notes: Optional[str] = None,
    ) -> Application:
        try:
            events = pipeline_executor.execute(db, application, commands, reviewer_id=actor_id, notes=notes)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(application)
        notification_dispatcher.dispatch(events)
        return application
    
    def _open_round_for(self, db: Session, round_id: int, application_id: int):
        recruitment_round = self.get_round(db, round_id)
        if recruitment_round.status not in OPEN_ROUND_STATUSES:
            raise ValidationError(f"Round is {recruitment_round.status}")
        application = db.query(Application).filter(Application.id == application_id).first()
        if not application:
            raise NotFoundError("Application", application_id)
        if application.opening_id != recruitment_round.opening_id:
            raise ValidationError("Application belongs to a different opening")
        return recruitment_round, application
    
    def add_candidate(
        self,
        db: Session,
        round_id: int,
        application_id: int,
        actor_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Application:
        recruitment_round, application = self._open_round_for(db, round_id, application_id)
        commands = plan_add_candidate(ApplicationSnapshot.of(application), recruitment_round.id)
        if not commands:
            return application
        
        application = self._run(db, application, commands, actor_id, notes)
        logger.info("round_candidate_added", round_id=round_id, application_id=application_id)
        return application
    
    def remove_candidate(
        self,
        db: Session,
        round_id: int,
        application_id: int,
        actor_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Application:
        recruitment_round, application = self._open_round_for(db, round_id, application_id)
        commands = plan_remove_candidate(ApplicationSnapshot.of(application), recruitment_round.id)
        
        application = self._run(db, application, commands, actor_id, notes)
        logger.info("round_candidate_removed", round_id=round_id, application_id=application_id)
        return application
    
    def complete_round(
        self,
        db: Session,
        round_id: int,
        actor_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Close a round and move its shortlisted candidates on.
        
        Each candidate is its own transaction, so one failure (for example
        a full next round) leaves the rest unaffected and the failed
        candidate still shortlisted here. Running it again only touches
        candidates that are still shortlisted in this round.
        """
        recruitment_round = self.get_round(db, round_id)
        if recruitment_round.status == RoundStatus.CANCELLED.value:
            raise ValidationError("Cannot complete a cancelled round")
        next_round = self.next_round(db, recruitment_round)
        if next_round is not None and next_round.status == RoundStatus.COMPLETED.value:
            raise ValidationError(
                f"Round {next_round.round_number} is already completed",
                details={"round_id": round_id, "next_round_id": next_round.id},
            )
        if recruitment_round.status != RoundStatus.COMPLETED.value:
            recruitment_round.status = RoundStatus.COMPLETED.value
            db.commit()
        
        next_round_id = next_round.id if next_round else None
        candidates = [
            ApplicationSnapshot.of(application)
            for application in _candidate_query(db, round_id)
            .filter(Application.status == ApplicationStatus.SHORTLISTED.value)
            .all()
        ]
        
        results = []
        for snapshot, commands in plan_round_completion(candidates, next_round_id):
            try:
                application = db.query(Application).filter(Application.id == snapshot.id).one()
                application = self._run(db, application, commands, actor_id)
                results.append({
                    "application_id": snapshot.id,
                    "success": True,
                    "status": application.status,
                    "round_id": application.current_round_id,
                })
            except CampusHireException as e:
                logger.warning(
                    "round_completion_item_failed",
                    round_id=round_id,
                    application_id=snapshot.id,
                    error=e.message,
                )
                results.append({
                    "application_id": snapshot.id,
                    "success": False,
                    "error": e.message,
                })
            except Exception as e:
                db.rollback()
                logger.exception(
                    "round_completion_item_error",
                    round_id=round_id,
                    application_id=snapshot.id,
                    error=str(e),
                )
                results.append({
                    "application_id": snapshot.id,
                    "success": False,
                    "error": str(e),
                })
        
        if next_round_id is not None:
            seats.sync_occupancy(db, next_round_id)
            db.commit()
        
        logger.info(
            "round_completed",
            round_id=round_id,
            next_round_id=next_round_id,
            processed=len(results),
            failed=sum(1 for r in results if not r["success"]),
        )
        return {
            "round_id": round_id,
            "next_round_id": next_round_id,
            "results": results,
        }


round_sequencer = RoundSequencer()
