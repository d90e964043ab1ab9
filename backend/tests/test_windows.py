"""
Application window registry tests
"""
from datetime import date, datetime, time

import pytest

from campushire.applications.service import application_service
from campushire.core.exceptions import ValidationError
from campushire.windows.registry import window_registry


def test_window_bounds_follow_time_of_day(db, make_opening, make_window):
    opening = make_opening()
    window = make_window(
        opening,
        start_date=date(2026, 5, 1),
        end_date=date(2026, 5, 3),
        start_time=time(9, 30),
        end_time=time(17, 0),
    )
    assert not window.is_open(datetime(2026, 5, 1, 9, 29, 59))
    assert window.is_open(datetime(2026, 5, 1, 9, 30))
    assert window.is_open(datetime(2026, 5, 2, 3, 0))
    assert window.is_open(datetime(2026, 5, 3, 17, 0, 59, 999999))
    assert not window.is_open(datetime(2026, 5, 3, 17, 1))


def test_open_windows_respect_time_on_boundary_days(db, make_opening, make_window):
    opening = make_opening()
    window = make_window(
        opening,
        start_date=date(2026, 5, 1),
        end_date=date(2026, 5, 1),
        start_time=time(10, 0),
        end_time=time(12, 0),
    )
    assert window_registry.get_open_windows(db, datetime(2026, 5, 1, 8, 0)) == []
    assert window_registry.get_open_windows(db, datetime(2026, 5, 1, 11, 0)) == [window]
    assert window_registry.find_open_window(db, opening.id, datetime(2026, 5, 1, 12, 30)) is None


def test_inactive_windows_are_never_open(db, make_opening, make_window, now):
    opening = make_opening()
    make_window(opening, is_active=False)
    assert window_registry.find_open_window(db, opening.id, now) is None


def test_upcoming_windows_sorted_and_limited(db, make_opening, make_window):
    opening = make_opening()
    now = datetime(2026, 5, 1, 12, 0)
    later = make_window(opening, start_date=date(2026, 5, 3), end_date=date(2026, 5, 4))
    sooner = make_window(opening, start_date=date(2026, 5, 2), end_date=date(2026, 5, 4))
    same_day = make_window(
        opening, start_date=date(2026, 5, 1), end_date=date(2026, 5, 2), start_time=time(15, 0)
    )
    make_window(opening, start_date=date(2026, 4, 30), end_date=date(2026, 5, 2))  # already open
    make_window(opening, start_date=date(2026, 5, 5), end_date=date(2026, 5, 6), is_active=False)
    
    upcoming = window_registry.get_upcoming_windows(db, now)
    assert [w.id for w in upcoming] == [same_day.id, sooner.id, later.id]
    assert len(window_registry.get_upcoming_windows(db, now, limit=2)) == 2


def test_create_window_rejects_inverted_range(db, make_opening):
    opening = make_opening()
    with pytest.raises(ValidationError):
        window_registry.create_window(
            db,
            opening.id,
            {
                "start_date": date(2026, 5, 3),
                "end_date": date(2026, 5, 1),
                "start_time": time(9, 0),
                "end_time": time(17, 0),
            },
        )


def test_update_window_rejects_inverted_range_and_keeps_old_values(db, make_opening, make_window):
    opening = make_opening()
    window = make_window(opening, start_date=date(2026, 5, 1), end_date=date(2026, 5, 3))
    with pytest.raises(ValidationError):
        window_registry.update_window(db, window.id, {"end_date": date(2026, 4, 1)})
    db.expire_all()
    assert window_registry.get_window(db, window.id).end_date == date(2026, 5, 3)


def test_update_window_refuses_to_clear_required_fields(db, make_opening, make_window):
    window = make_window(make_opening())
    with pytest.raises(ValidationError) as exc_info:
        window_registry.update_window(db, window.id, {"is_active": None, "description": None})
    assert exc_info.value.details == {"fields": ["is_active"]}
    db.expire_all()
    assert window_registry.get_window(db, window.id).is_active is True
    
    updated = window_registry.update_window(db, window.id, {"description": None, "min_cgpa": None})
    assert updated.description is None


def test_count_eligible_students(db, make_opening, make_window, make_student):
    opening = make_opening(eligible_branches=["CSE", "IT"])
    window = make_window(opening, min_cgpa=7.0, max_backlogs=1, passing_year=2026)
    make_student(cgpa=8.0, branch="CSE")
    make_student(cgpa=7.0, branch="IT", backlogs=1)
    make_student(cgpa=6.9, branch="CSE")
    make_student(cgpa=9.0, branch="MECH")
    make_student(cgpa=9.0, batch=2025)
    make_student(cgpa=9.0, placed=True)
    make_student(cgpa=9.0, backlogs=2)
    
    assert window_registry.count_eligible_students(db, window) == 2


def test_count_ignores_existing_applications(db, open_opening, make_student):
    s = make_student()
    application_service.create_application(db, s.id, open_opening.id)
    window = window_registry.list_windows(db, open_opening.id)[0]
    assert window_registry.count_eligible_students(db, window) == 1


def test_deactivate_window(db, make_opening, make_window, now):
    opening = make_opening()
    window = make_window(opening)
    window_registry.deactivate_window(db, window.id)
    assert window_registry.find_open_window(db, opening.id, now) is None
