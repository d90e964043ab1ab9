"""
Round occupancy counter

The counter is only changed through single conditional UPDATE statements so
two writers holding stale copies of a round can never push it past capacity
or below zero.
"""
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
import structlog

from campushire.core.database import expire_cached
from campushire.core.exceptions import ConflictError, ValidationError
from campushire.models.application import Application
from campushire.models.round import RecruitmentRound
from campushire.pipeline.states import ApplicationStatus

logger = structlog.get_logger()

rounds_table = RecruitmentRound.__table__


def reserve_seat(db: Session, round_id: int) -> None:
    """Take one seat or raise ConflictError when the round is full"""
    result = db.execute(
        rounds_table.update()
        .where(
            rounds_table.c.id == round_id,
            or_(
                rounds_table.c.max_candidates.is_(None),
                rounds_table.c.current_candidates < rounds_table.c.max_candidates,
            ),
        )
        .values(current_candidates=rounds_table.c.current_candidates + 1)
    )
    expire_cached(db, RecruitmentRound, round_id)
    if result.rowcount == 0:
        logger.warning("round_capacity_exceeded", round_id=round_id)
        raise ConflictError("Round is already full", details={"round_id": round_id})


def release_seat(db: Session, round_id: int) -> None:
    """Give back one seat; the counter never goes below zero"""
    db.execute(
        rounds_table.update()
        .where(
            rounds_table.c.id == round_id,
            rounds_table.c.current_candidates > 0,
        )
        .values(current_candidates=rounds_table.c.current_candidates - 1)
    )
    expire_cached(db, RecruitmentRound, round_id)


def live_occupancy(db: Session, round_id: int) -> int:
    return (
        db.query(func.count(Application.id))
        .filter(
            Application.current_round_id == round_id,
            Application.status != ApplicationStatus.REJECTED.value,
        )
        .scalar()
        or 0
    )


def sync_occupancy(db: Session, round_id: int) -> int:
    """Reset the counter to the number of live applications in the round"""
    count = live_occupancy(db, round_id)
    db.execute(
        rounds_table.update()
        .where(rounds_table.c.id == round_id)
        .values(current_candidates=count)
    )
    expire_cached(db, RecruitmentRound, round_id)
    logger.info("round_occupancy_synced", round_id=round_id, current_candidates=count)
    return count


def set_capacity(db: Session, round_id: int, max_candidates) -> None:
    """Change capacity unless it would drop below the seats already taken"""
    condition = [rounds_table.c.id == round_id]
    if max_candidates is not None:
        condition.append(rounds_table.c.current_candidates <= max_candidates)
    result = db.execute(
        rounds_table.update().where(*condition).values(max_candidates=max_candidates)
    )
    expire_cached(db, RecruitmentRound, round_id)
    if result.rowcount == 0:
        raise ValidationError(
            "Capacity cannot be lower than the candidates already in the round",
            details={"round_id": round_id, "max_candidates": max_candidates},
        )
