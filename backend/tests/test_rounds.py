"""
Round sequencer tests
"""
from datetime import timedelta

import pytest

from campushire.applications.service import application_service
from campushire.core.exceptions import ConflictError, ValidationError
from campushire.models import RecruitmentRound
from campushire.pipeline.executor import pipeline_executor
from campushire.pipeline.states import ApplicationStatus as S
from campushire.rounds import seats
from campushire.rounds.sequencer import round_sequencer


@pytest.fixture
def apply(db, open_opening, make_student):
    def submit(**student_overrides):
        student = make_student(**student_overrides)
        return application_service.create_application(db, student.id, open_opening.id)
    return submit


def test_round_progression(db, open_opening, make_round, apply, recruiter):
    round_1 = make_round(open_opening, 1)
    round_2 = make_round(open_opening, 2)
    a = apply()
    application_service.update_status(db, a.id, S.SHORTLISTED, recruiter.id)
    
    outcome = round_sequencer.complete_round(db, round_1.id, recruiter.id)
    
    assert outcome["next_round_id"] == round_2.id
    assert outcome["results"] == [
        {"application_id": a.id, "success": True, "status": "submitted", "round_id": round_2.id}
    ]
    db.refresh(a)
    db.refresh(round_1)
    db.refresh(round_2)
    assert a.status == "submitted"
    assert a.current_round_id == round_2.id
    assert round_2.current_candidates == 1
    assert round_1.status == "completed"


def test_terminal_placement(db, open_opening, make_round, apply, recruiter):
    round_1 = make_round(open_opening, 1)
    round_2 = make_round(open_opening, 2)
    a = apply()
    application_service.update_status(db, a.id, S.SHORTLISTED, recruiter.id)
    round_sequencer.complete_round(db, round_1.id, recruiter.id)
    application_service.update_status(db, a.id, S.SHORTLISTED, recruiter.id)
    
    db.refresh(a)
    assert a.current_round_id == round_2.id
    
    outcome = round_sequencer.complete_round(db, round_2.id, recruiter.id)
    assert outcome["next_round_id"] is None
    db.refresh(a)
    assert a.status == "selected"
    assert a.student.placed is True
    assert a.student.placed_opening_id == open_opening.id


def test_completion_skips_cancelled_next_round(db, open_opening, make_round, apply, recruiter):
    round_1 = make_round(open_opening, 1)
    make_round(open_opening, 2, status="cancelled")
    round_3 = make_round(open_opening, 3)
    a = apply()
    application_service.update_status(db, a.id, S.SHORTLISTED, recruiter.id)
    
    outcome = round_sequencer.complete_round(db, round_1.id, recruiter.id)
    assert outcome["next_round_id"] == round_3.id


def test_completion_leaves_non_shortlisted_alone(db, open_opening, make_round, apply, recruiter):
    round_1 = make_round(open_opening, 1)
    make_round(open_opening, 2)
    a, b = apply(), apply()
    application_service.update_status(db, a.id, S.SHORTLISTED, recruiter.id)
    application_service.update_status(db, b.id, S.SHORTLISTED, recruiter.id)
    application_service.update_status(db, b.id, S.REJECTED, recruiter.id)
    
    outcome = round_sequencer.complete_round(db, round_1.id, recruiter.id)
    assert [r["application_id"] for r in outcome["results"]] == [a.id]
    db.refresh(b)
    assert b.status == "rejected"
    assert b.current_round_id == round_1.id


def test_completion_rerun_is_a_noop(db, open_opening, make_round, apply, recruiter):
    round_1 = make_round(open_opening, 1)
    round_2 = make_round(open_opening, 2)
    a = apply()
    application_service.update_status(db, a.id, S.SHORTLISTED, recruiter.id)
    round_sequencer.complete_round(db, round_1.id, recruiter.id)
    
    again = round_sequencer.complete_round(db, round_1.id, recruiter.id)
    assert again["results"] == []
    db.refresh(round_2)
    assert round_2.current_candidates == 1


def test_completion_full_next_round_fails_per_item(db, open_opening, make_round, apply, recruiter):
    round_1 = make_round(open_opening, 1)
    round_2 = make_round(open_opening, 2, max_candidates=1)
    low, high = apply(), apply()
    for application, score in ((low, 40), (high, 90)):
        application_service.update_status(db, application.id, S.SHORTLISTED, recruiter.id)
        application_service.update_score(db, application.id, score, recruiter.id)
    
    outcome = round_sequencer.complete_round(db, round_1.id, recruiter.id)
    
    by_id = {r["application_id"]: r for r in outcome["results"]}
    assert by_id[high.id]["success"] is True
    assert by_id[low.id]["success"] is False
    assert by_id[low.id]["error"] == "Round is already full"
    db.refresh(low)
    db.refresh(round_2)
    assert low.status == "shortlisted"
    assert low.current_round_id == round_1.id
    assert round_2.current_candidates == 1


def test_cancelled_round_cannot_complete(db, open_opening, make_round):
    cancelled = make_round(open_opening, 1, status="cancelled")
    with pytest.raises(ValidationError):
        round_sequencer.complete_round(db, cancelled.id)


def test_add_candidate_respects_capacity(db, open_opening, make_round, apply, recruiter):
    round_1 = make_round(open_opening, 1, max_candidates=2)
    a, b, c = apply(), apply(), apply()
    round_sequencer.add_candidate(db, round_1.id, a.id, recruiter.id)
    round_sequencer.add_candidate(db, round_1.id, b.id, recruiter.id)
    
    with pytest.raises(ConflictError) as exc_info:
        round_sequencer.add_candidate(db, round_1.id, c.id, recruiter.id)
    assert exc_info.value.message == "Round is already full"
    
    db.refresh(round_1)
    db.refresh(c)
    assert round_1.current_candidates == 2
    assert c.current_round_id is None
    assert c.status == "submitted"


def test_add_candidate_twice_is_idempotent(db, open_opening, make_round, apply, recruiter):
    round_1 = make_round(open_opening, 1)
    a = apply()
    round_sequencer.add_candidate(db, round_1.id, a.id, recruiter.id)
    round_sequencer.add_candidate(db, round_1.id, a.id, recruiter.id)
    db.refresh(round_1)
    assert round_1.current_candidates == 1


def test_capacity_holds_with_stale_reads(db, other_session, open_opening, make_round, apply):
    round_1 = make_round(open_opening, 1, max_candidates=1)
    a, b = apply(), apply()
    rival = other_session()
    
    # Both sessions have loaded the round while it still had a free seat
    assert rival.get(RecruitmentRound, round_1.id).current_candidates == 0
    assert db.get(RecruitmentRound, round_1.id).current_candidates == 0
    
    round_sequencer.add_candidate(rival, round_1.id, a.id)
    with pytest.raises(ConflictError):
        round_sequencer.add_candidate(db, round_1.id, b.id)
    
    db.expire_all()
    assert db.get(RecruitmentRound, round_1.id).current_candidates == 1


def test_remove_candidate_rejects_and_frees_seat(db, open_opening, make_round, apply, recruiter):
    round_1 = make_round(open_opening, 1)
    a = apply()
    round_sequencer.add_candidate(db, round_1.id, a.id, recruiter.id)
    
    round_sequencer.remove_candidate(db, round_1.id, a.id, recruiter.id)
    db.refresh(a)
    db.refresh(round_1)
    assert a.status == "rejected"
    assert a.current_round_id is None
    assert round_1.current_candidates == 0


def test_release_never_goes_negative(db, open_opening, make_round):
    round_1 = make_round(open_opening, 1)
    seats.release_seat(db, round_1.id)
    db.commit()
    db.refresh(round_1)
    assert round_1.current_candidates == 0


def test_list_candidates_sorted_by_score(db, open_opening, make_round, apply, recruiter):
    round_1 = make_round(open_opening, 1)
    a, b, c = apply(), apply(), apply()
    for application in (a, b, c):
        round_sequencer.add_candidate(db, round_1.id, application.id, recruiter.id)
    application_service.update_score(db, b.id, 70, recruiter.id)
    application_service.update_score(db, c.id, 85, recruiter.id)
    
    ordered = round_sequencer.list_candidates(db, round_1.id)
    assert [x.id for x in ordered] == [c.id, b.id, a.id]


def test_create_round_numbering(db, open_opening, now):
    data = {"name": "Aptitude", "scheduled_date": now + timedelta(days=3)}
    first = round_sequencer.create_round(db, open_opening.id, dict(data))
    assert first.round_number == 1
    
    with pytest.raises(ValidationError) as exc_info:
        round_sequencer.create_round(db, open_opening.id, dict(data, round_number=1))
    assert exc_info.value.message == "Round 1 already exists for this company"
    
    with pytest.raises(ValidationError):
        round_sequencer.create_round(db, open_opening.id, dict(data, round_number=3))
    
    second = round_sequencer.create_round(db, open_opening.id, dict(data, round_number=2))
    assert second.round_number == 2


def test_create_round_in_the_past(db, open_opening, now):
    with pytest.raises(ValidationError) as exc_info:
        round_sequencer.create_round(
            db, open_opening.id, {"name": "Late", "scheduled_date": now - timedelta(hours=1)}
        )
    assert exc_info.value.message == "Scheduled date must be in the future"


def test_round_status_moves(db, open_opening, make_round):
    round_1 = make_round(open_opening, 1)
    assert round_sequencer.update_round_status(db, round_1.id, "ongoing").status == "ongoing"
    with pytest.raises(ValidationError):
        round_sequencer.update_round_status(db, round_1.id, "upcoming")
    assert round_sequencer.update_round_status(db, round_1.id, "completed").status == "completed"
    with pytest.raises(ValidationError):
        round_sequencer.update_round_status(db, round_1.id, "cancelled")


def test_completion_refuses_to_feed_a_completed_round(db, open_opening, make_round, apply, recruiter):
    round_1 = make_round(open_opening, 1)
    round_2 = make_round(open_opening, 2)
    a = apply()
    application_service.update_status(db, a.id, S.SHORTLISTED, recruiter.id)
    round_sequencer.complete_round(db, round_2.id, recruiter.id)
    
    with pytest.raises(ValidationError) as exc_info:
        round_sequencer.complete_round(db, round_1.id, recruiter.id)
    assert exc_info.value.message == "Round 2 is already completed"
    
    db.refresh(a)
    db.refresh(round_1)
    assert a.status == "shortlisted"
    assert a.current_round_id == round_1.id
    assert round_1.status == "upcoming"


def test_completion_reports_unexpected_item_errors(db, open_opening, make_round, apply, recruiter, monkeypatch):
    round_1 = make_round(open_opening, 1)
    round_2 = make_round(open_opening, 2)
    first, second = apply(), apply()
    for application, score in ((first, 90), (second, 60)):
        application_service.update_status(db, application.id, S.SHORTLISTED, recruiter.id)
        application_service.update_score(db, application.id, score, recruiter.id)
    
    execute = pipeline_executor.execute
    
    def flaky_execute(session, application, commands, **kwargs):
        if application.id == first.id:
            raise RuntimeError("database went away")
        return execute(session, application, commands, **kwargs)
    
    monkeypatch.setattr(pipeline_executor, "execute", flaky_execute)
    outcome = round_sequencer.complete_round(db, round_1.id, recruiter.id)
    
    by_id = {r["application_id"]: r for r in outcome["results"]}
    assert by_id[first.id] == {"application_id": first.id, "success": False, "error": "database went away"}
    assert by_id[second.id]["success"] is True
    assert by_id[second.id]["round_id"] == round_2.id
    db.refresh(first)
    db.refresh(round_2)
    assert first.status == "shortlisted"
    assert first.current_round_id == round_1.id
    assert round_2.current_candidates == 1


def test_update_round_details(db, open_opening, make_round, now):
    round_1 = make_round(open_opening, 1)
    updated = round_sequencer.update_round(
        db,
        round_1.id,
        {"name": "Group discussion", "location": "Seminar hall", "scheduled_date": now + timedelta(days=5)},
        now=now,
    )
    assert updated.name == "Group discussion"
    assert updated.location == "Seminar hall"
    assert updated.scheduled_date == now + timedelta(days=5)
    
    with pytest.raises(ValidationError):
        round_sequencer.update_round(db, round_1.id, {"scheduled_date": now - timedelta(days=1)}, now=now)
    with pytest.raises(ValidationError):
        round_sequencer.update_round(db, round_1.id, {"name": None})


def test_update_round_capacity_cannot_drop_below_occupancy(db, open_opening, make_round, apply, recruiter):
    round_1 = make_round(open_opening, 1, max_candidates=5)
    for application in (apply(), apply()):
        round_sequencer.add_candidate(db, round_1.id, application.id, recruiter.id)
    
    with pytest.raises(ValidationError):
        round_sequencer.update_round(db, round_1.id, {"max_candidates": 1, "name": "Renamed"})
    db.refresh(round_1)
    assert round_1.max_candidates == 5
    assert round_1.name == "Round 1"
    
    assert round_sequencer.update_round(db, round_1.id, {"max_candidates": 2}).max_candidates == 2
    assert round_sequencer.update_round(db, round_1.id, {"max_candidates": None}).max_candidates is None


def test_completed_round_is_frozen(db, open_opening, make_round, recruiter):
    round_1 = make_round(open_opening, 1)
    round_sequencer.complete_round(db, round_1.id, recruiter.id)
    with pytest.raises(ValidationError) as exc_info:
        round_sequencer.update_round(db, round_1.id, {"name": "Late rename"})
    assert exc_info.value.message == "Round is completed"


def test_delete_round_renumbers_later_rounds(db, open_opening, make_round):
    round_1 = make_round(open_opening, 1)
    round_2 = make_round(open_opening, 2)
    round_3 = make_round(open_opening, 3)
    
    round_sequencer.delete_round(db, round_2.id)
    
    remaining = round_sequencer.list_rounds(db, open_opening.id)
    assert [(r.id, r.round_number) for r in remaining] == [(round_1.id, 1), (round_3.id, 2)]
    assert db.get(RecruitmentRound, round_2.id) is None


def test_delete_round_requires_empty_upcoming_round(db, open_opening, make_round, apply, recruiter):
    occupied = make_round(open_opening, 1)
    started = make_round(open_opening, 2, status="ongoing")
    a = apply()
    round_sequencer.add_candidate(db, occupied.id, a.id, recruiter.id)
    
    with pytest.raises(ValidationError) as exc_info:
        round_sequencer.delete_round(db, occupied.id)
    assert exc_info.value.message == "Round still has candidates"
    with pytest.raises(ValidationError):
        round_sequencer.delete_round(db, started.id)
    assert len(round_sequencer.list_rounds(db, open_opening.id)) == 2
