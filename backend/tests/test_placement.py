"""
Placement finalizer tests
"""
import pytest

from campushire.core.exceptions import ConflictError
from campushire.eligibility.service import eligibility_service
from campushire.placements.finalizer import placement_finalizer


def test_finalize_places_student(db, make_student, make_opening):
    s = make_student()
    opening = make_opening()
    assert placement_finalizer.finalize(db, s.id, opening.id) is True
    db.commit()
    
    db.refresh(s)
    assert s.placed is True
    assert s.placed_opening_id == opening.id
    assert s.placed_at is not None


def test_finalize_same_opening_twice_is_noop(db, make_student, make_opening):
    s = make_student()
    opening = make_opening()
    placement_finalizer.finalize(db, s.id, opening.id)
    db.commit()
    assert placement_finalizer.finalize(db, s.id, opening.id) is False


def test_second_opening_is_rejected(db, make_student, make_opening):
    s = make_student()
    first, second = make_opening(company_name="First"), make_opening(company_name="Second")
    placement_finalizer.finalize(db, s.id, first.id)
    db.commit()
    
    with pytest.raises(ConflictError):
        placement_finalizer.finalize(db, s.id, second.id)
    db.rollback()
    db.refresh(s)
    assert s.placed_opening_id == first.id


def test_placement_race_between_sessions(db, other_session, make_student, make_opening):
    s = make_student()
    first, second = make_opening(company_name="First"), make_opening(company_name="Second")
    rival = other_session()
    
    placement_finalizer.finalize(rival, s.id, first.id)
    rival.commit()
    with pytest.raises(ConflictError):
        placement_finalizer.finalize(db, s.id, second.id)
    db.rollback()


def test_placed_student_is_no_longer_eligible(db, make_student, open_opening, make_opening):
    s = make_student()
    placement_finalizer.finalize(db, s.id, make_opening(company_name="Earlier").id)
    db.commit()
    result = eligibility_service.check(db, s.id, open_opening.id)
    assert result.reason == "Student is already placed"
