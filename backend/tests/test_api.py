"""
HTTP API tests
"""
from datetime import timedelta

import pytest

from campushire.applications.service import application_service
from campushire.models import Role, User


@pytest.fixture
def student_user(db, make_student):
    user = User(email="student@campus.test", full_name="Student", role=Role.STUDENT.value, is_active=True)
    db.add(user)
    db.commit()
    student = make_student(user_id=user.id, cgpa=8.2)
    return user, student


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_missing_token_is_401(client):
    response = client.get("/api/v1/openings/")
    assert response.status_code == 401
    assert response.json()["error"]["type"] == "AuthenticationError"


def test_garbage_token_is_401(client):
    response = client.get("/api/v1/openings/", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_student_cannot_review(client, auth_headers, student_user, open_opening):
    user, _ = student_user
    response = client.put(
        "/api/v1/applications/1/status",
        json={"status": "shortlisted"},
        headers=auth_headers(user),
    )
    assert response.status_code == 403
    assert response.json()["error"]["type"] == "AuthorizationError"


def test_create_opening_window_and_round(client, auth_headers, recruiter, now):
    headers = auth_headers(recruiter)
    response = client.post(
        "/api/v1/openings/",
        json={
            "company_name": "Initech",
            "role_title": "Backend Engineer",
            "application_deadline": (now + timedelta(days=5)).isoformat(),
            "min_cgpa": 7.0,
            "eligible_branches": ["CSE"],
        },
        headers=headers,
    )
    assert response.status_code == 201
    opening_id = response.json()["id"]
    
    response = client.post(
        f"/api/v1/openings/{opening_id}/windows",
        json={
            "start_date": (now - timedelta(days=1)).date().isoformat(),
            "end_date": (now + timedelta(days=2)).date().isoformat(),
        },
        headers=headers,
    )
    assert response.status_code == 201
    
    response = client.post(
        f"/api/v1/openings/{opening_id}/rounds",
        json={"name": "Aptitude", "scheduled_date": (now + timedelta(days=3)).isoformat()},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["round_number"] == 1
    
    response = client.get("/api/v1/windows/open", headers=headers)
    assert [w["opening_id"] for w in response.json()] == [opening_id]


def test_inverted_window_is_422(client, auth_headers, recruiter, open_opening):
    response = client.post(
        f"/api/v1/openings/{open_opening.id}/windows",
        json={"start_date": "2026-05-03", "end_date": "2026-05-01"},
        headers=auth_headers(recruiter),
    )
    assert response.status_code == 422
    assert response.json()["error"]["type"] == "ValidationError"


def test_ineligible_apply_returns_reason(client, auth_headers, student_user, make_opening, make_window):
    user, _ = student_user
    opening = make_opening()
    make_window(opening, min_cgpa=9.0)
    
    response = client.post(
        "/api/v1/applications/", json={"opening_id": opening.id}, headers=auth_headers(user)
    )
    assert response.status_code == 422
    body = response.json()["error"]
    assert body["type"] == "IneligibleError"
    assert body["message"] == "Minimum CGPA required is 9.0"


def test_apply_review_and_history(client, auth_headers, student_user, recruiter, open_opening):
    user, student = student_user
    response = client.post(
        "/api/v1/applications/",
        json={"opening_id": open_opening.id, "form_data": {"skills": ["sql"]}},
        headers=auth_headers(user),
    )
    assert response.status_code == 201
    application = response.json()
    assert application["status"] == "submitted"
    assert application["student_id"] == student.id
    
    again = client.post(
        "/api/v1/applications/", json={"opening_id": open_opening.id}, headers=auth_headers(user)
    )
    assert again.status_code == 422
    assert again.json()["error"]["message"] == "You have already applied to this company"
    
    staff = auth_headers(recruiter)
    response = client.put(
        f"/api/v1/applications/{application['id']}/review",
        json={"status": "under-review", "score": 64, "notes": "Solid basics"},
        headers=staff,
    )
    assert response.status_code == 200
    assert response.json()["score"] == 64
    
    response = client.put(
        f"/api/v1/applications/{application['id']}/status",
        json={"status": "selected"},
        headers=staff,
    )
    assert response.status_code == 422
    assert response.json()["error"]["type"] == "InvalidTransitionError"
    
    history = client.get(f"/api/v1/applications/{application['id']}/history", headers=staff).json()
    assert len(history) == 1
    assert history[0]["review_type"] == "both"
    assert history[0]["reviewer_id"] == recruiter.id


def test_round_flow_over_http(client, auth_headers, recruiter, open_opening, make_round, make_student, db):
    round_1 = make_round(open_opening, 1)
    round_2 = make_round(open_opening, 2)
    application = application_service.create_application(db, make_student().id, open_opening.id)
    staff = auth_headers(recruiter)
    
    response = client.post(
        f"/api/v1/rounds/{round_1.id}/candidates",
        json={"application_id": application.id},
        headers=staff,
    )
    assert response.status_code == 200
    assert response.json()["current_round_id"] == round_1.id
    
    response = client.post(f"/api/v1/rounds/{round_1.id}/complete", headers=staff)
    assert response.status_code == 200
    assert response.json()["results"][0]["round_id"] == round_2.id
    
    response = client.get(f"/api/v1/rounds/{round_2.id}", headers=staff)
    assert response.json()["current_candidates"] == 1


def test_full_round_is_409(client, auth_headers, recruiter, open_opening, make_round, make_student, db):
    round_1 = make_round(open_opening, 1, max_candidates=1)
    first = application_service.create_application(db, make_student().id, open_opening.id)
    second = application_service.create_application(db, make_student().id, open_opening.id)
    staff = auth_headers(recruiter)
    
    client.post(f"/api/v1/rounds/{round_1.id}/candidates", json={"application_id": first.id}, headers=staff)
    response = client.post(
        f"/api/v1/rounds/{round_1.id}/candidates", json={"application_id": second.id}, headers=staff
    )
    assert response.status_code == 409
    assert response.json()["error"]["details"]["retryable"] is True


def test_bulk_update_endpoint(client, auth_headers, recruiter, open_opening, make_student, db):
    a = application_service.create_application(db, make_student().id, open_opening.id)
    response = client.post(
        "/api/v1/applications/bulk-update",
        json={"application_ids": [a.id, 424242], "action": "reject"},
        headers=auth_headers(recruiter),
    )
    assert response.status_code == 200
    results = {r["application_id"]: r for r in response.json()}
    assert results[a.id]["status"] == "rejected"
    assert results[424242]["success"] is False


def test_eligible_count_endpoint(client, auth_headers, admin, make_opening, make_window, make_student):
    opening = make_opening()
    window = make_window(opening, passing_year=2026)
    make_student(batch=2026)
    make_student(batch=2027)
    
    response = client.get(f"/api/v1/windows/{window.id}/eligible-count", headers=auth_headers(admin))
    assert response.json() == {"window_id": window.id, "eligible_students": 1}


def test_student_sees_own_notifications(client, auth_headers, student_user, recruiter, open_opening):
    user, _ = student_user
    created = client.post(
        "/api/v1/applications/", json={"opening_id": open_opening.id}, headers=auth_headers(user)
    ).json()
    client.put(
        f"/api/v1/applications/{created['id']}/status",
        json={"status": "rejected"},
        headers=auth_headers(recruiter),
    )
    
    notices = client.get("/api/v1/notifications/", headers=auth_headers(user)).json()
    assert notices[0]["message"] == f"Your application for {open_opening.company_name} has been rejected."


@pytest.mark.parametrize("payload", [{"is_active": None}, {"start_date": None}])
def test_clearing_required_window_field_is_422(client, auth_headers, recruiter, open_opening, db, payload):
    window = open_opening.windows[0]
    response = client.patch(f"/api/v1/windows/{window.id}", json=payload, headers=auth_headers(recruiter))
    assert response.status_code == 422
    assert response.json()["error"]["type"] == "ValidationError"


def test_clearing_required_opening_field_is_422(client, auth_headers, recruiter, open_opening):
    response = client.patch(
        f"/api/v1/openings/{open_opening.id}",
        json={"company_name": None, "description": "Backend team"},
        headers=auth_headers(recruiter),
    )
    assert response.status_code == 422
    assert response.json()["error"]["details"] == {"fields": ["company_name"]}


def test_round_edit_and_delete_over_http(client, auth_headers, recruiter, open_opening, make_round, now):
    first = make_round(open_opening, 1)
    second = make_round(open_opening, 2)
    staff = auth_headers(recruiter)
    
    response = client.patch(
        f"/api/v1/rounds/{second.id}",
        json={"name": "Technical interview", "max_candidates": 10},
        headers=staff,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Technical interview"
    assert response.json()["max_candidates"] == 10
    
    response = client.delete(f"/api/v1/rounds/{first.id}", headers=staff)
    assert response.status_code == 204
    
    response = client.get(f"/api/v1/openings/{open_opening.id}/rounds", headers=staff)
    assert [(r["id"], r["round_number"]) for r in response.json()] == [(second.id, 1)]


def test_remove_candidate_notes_reach_history(client, auth_headers, recruiter, open_opening, make_round, make_student, db):
    round_1 = make_round(open_opening, 1)
    application = application_service.create_application(db, make_student().id, open_opening.id)
    staff = auth_headers(recruiter)
    
    client.post(
        f"/api/v1/rounds/{round_1.id}/candidates",
        json={"application_id": application.id, "notes": "Strong aptitude score"},
        headers=staff,
    )
    response = client.delete(
        f"/api/v1/rounds/{round_1.id}/candidates/{application.id}",
        params={"notes": "No-show"},
        headers=staff,
    )
    assert response.status_code == 200
    
    response = client.get(f"/api/v1/applications/{application.id}/history", headers=staff)
    assert [row["notes"] for row in response.json()] == ["No-show", "Strong aptitude score"]
