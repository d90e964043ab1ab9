"""
Placement finalizer
"""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session
import structlog

from campushire.core.clock import utc_now
from campushire.core.database import expire_cached
from campushire.core.exceptions import ConflictError, NotFoundError
from campushire.models.student import Student

logger = structlog.get_logger()

students_table = Student.__table__


class PlacementFinalizer:
    """Marks a student permanently placed at one opening"""
    
    def finalize(
        self,
        db: Session,
        student_id: int,
        opening_id: int,
        placed_at: Optional[datetime] = None,
    ) -> bool:
        """
        Place the student at ``opening_id`` inside the caller's transaction.
        
        Returns True when this call placed the student and False when the
        same opening had already placed them. A student placed at a different
        opening is left untouched and ConflictError is raised.
        """
        result = db.execute(
            students_table.update()
            .where(students_table.c.id == student_id, students_table.c.placed == False)
            .values(
                placed=True,
                placed_opening_id=opening_id,
                placed_at=placed_at or utc_now(),
            )
        )
        expire_cached(db, Student, student_id)
        if result.rowcount == 1:
            logger.info("student_placed", student_id=student_id, opening_id=opening_id)
            return True
        
        row = (
            db.query(Student.placed_opening_id)
            .filter(Student.id == student_id)
            .first()
        )
        if row is None:
            raise NotFoundError("Student", student_id)
        if row.placed_opening_id == opening_id:
            return False
        
        logger.warning(
            "placement_conflict",
            student_id=student_id,
            opening_id=opening_id,
            placed_opening_id=row.placed_opening_id,
        )
        raise ConflictError(
            "Student is already placed at another opening",
            details={"student_id": student_id, "placed_opening_id": row.placed_opening_id},
        )


placement_finalizer = PlacementFinalizer()
