"""
Shared fixtures: a throwaway SQLite database, eager Celery and factories
"""
import os
import tempfile
from datetime import time, timedelta

_TEST_DIR = tempfile.mkdtemp(prefix="campushire-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DIR, 'test.db')}"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["CACHE_ENABLED"] = "false"
os.environ["NOTIFICATIONS_ENABLED"] = "true"
os.environ["LOG_JSON"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from campushire.auth.service import token_for_user  # noqa: E402
from campushire.core.clock import campus_now  # noqa: E402
from campushire.core.database import Base, SessionLocal, engine  # noqa: E402
from campushire.models import (  # noqa: E402
    ApplicationWindow,
    RecruitmentOpening,
    RecruitmentRound,
    Role,
    Student,
    User,
)


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def other_session(db):
    """A second, independent session for race scenarios"""
    sessions = []
    
    def factory():
        session = SessionLocal()
        sessions.append(session)
        return session
    
    yield factory
    for session in sessions:
        session.close()


@pytest.fixture
def now():
    return campus_now()


@pytest.fixture
def admin(db):
    user = User(email="admin@campus.test", full_name="Admin", role=Role.ADMIN.value, is_active=True)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def recruiter(db):
    user = User(email="recruiter@campus.test", full_name="Recruiter", role=Role.RECRUITER.value, is_active=True)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def make_student(db):
    counter = {"n": 0}
    
    def factory(**overrides):
        counter["n"] += 1
        data = {
            "roll_number": f"CS{counter['n']:04d}",
            "full_name": f"Student {counter['n']}",
            "branch": "CSE",
            "batch": 2026,
            "cgpa": 8.0,
            "backlogs": 0,
            "placed": False,
        }
        data.update(overrides)
        student = Student(**data)
        db.add(student)
        db.commit()
        return student
    
    return factory


@pytest.fixture
def make_opening(db, now):
    def factory(**overrides):
        data = {
            "company_name": "Acme Systems",
            "role_title": "Software Engineer",
            "status": "active",
            "application_deadline": now + timedelta(days=7),
            "total_positions": 5,
            "eligible_branches": [],
        }
        data.update(overrides)
        opening = RecruitmentOpening(**data)
        db.add(opening)
        db.commit()
        return opening
    
    return factory


@pytest.fixture
def make_window(db, now):
    """Open by default: from yesterday 00:00 through tomorrow 23:59"""
    def factory(opening, **overrides):
        data = {
            "opening_id": opening.id,
            "start_date": (now - timedelta(days=1)).date(),
            "end_date": (now + timedelta(days=1)).date(),
            "start_time": time(0, 0),
            "end_time": time(23, 59),
            "is_active": True,
        }
        data.update(overrides)
        window = ApplicationWindow(**data)
        db.add(window)
        db.commit()
        return window
    
    return factory


@pytest.fixture
def make_round(db, now):
    def factory(opening, round_number, **overrides):
        data = {
            "opening_id": opening.id,
            "name": f"Round {round_number}",
            "round_number": round_number,
            "scheduled_date": now + timedelta(days=round_number),
            "status": "upcoming",
            "current_candidates": 0,
        }
        data.update(overrides)
        recruitment_round = RecruitmentRound(**data)
        db.add(recruitment_round)
        db.commit()
        return recruitment_round
    
    return factory


@pytest.fixture
def open_opening(make_opening, make_window):
    """An active opening with an open window and no criteria"""
    opening = make_opening()
    make_window(opening)
    return opening


@pytest.fixture
def client(db):
    from campushire.main import app
    return TestClient(app)


@pytest.fixture
def auth_headers():
    def build(user):
        return {"Authorization": f"Bearer {token_for_user(user)}"}
    return build

