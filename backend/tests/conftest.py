"""Shared test fixtures for the TeamPulse backend test suite."""

from datetime import date, timedelta

import fakeredis
import pytest

from teampulse.models.records import CheckIn, Profile, Task, TaskStatus, TeamCompatibility
from teampulse.store.records import save_student, save_task, save_team


# ── Redis ────────────────────────────────────────────────────────────────

@pytest.fixture
def r():
    """Fresh fakeredis instance per test (decode_responses=True like production)."""
    return fakeredis.FakeRedis(decode_responses=True)


# ── Time ─────────────────────────────────────────────────────────────────

@pytest.fixture
def today():
    """Fixed reference date for deterministic confidence tests."""
    return date(2026, 2, 15)


# ── Record Factories ────────────────────────────────────────────────────

@pytest.fixture
def make_profile():
    """Factory fixture for Profile snapshots.

    Usage:
        profile = make_profile(trait_code="ENTP", skills={"development": 4})
    """
    def _factory(**overrides):
        defaults = {"student_id": "S001", "trait_code": "INTJ"}
        defaults.update(overrides)
        return Profile(**defaults)

    return _factory


@pytest.fixture
def make_task():
    """Factory fixture that creates Task instances with sensible defaults."""
    _counter = 0

    def _factory(**overrides):
        nonlocal _counter
        _counter += 1
        defaults = {
            "task_id": f"test-task-{_counter}",
            "status": TaskStatus.PENDING,
            "difficulty": 3,
            "category": "development",
        }
        defaults.update(overrides)
        return Task(**defaults)

    return _factory


@pytest.fixture
def make_check_ins(today):
    """Build one check-in per day ending on ``end`` (default: today).

    Usage:
        check_ins = make_check_ins([3, 4, 4.5])
    """
    def _factory(scores, end=None):
        end = end or today
        start = end - timedelta(days=len(scores) - 1)
        return [
            CheckIn(date=start + timedelta(days=i), motivation_score=float(score))
            for i, score in enumerate(scores)
        ]

    return _factory


@pytest.fixture
def no_partners():
    return TeamCompatibility()


# ── Seeded store ────────────────────────────────────────────────────────

@pytest.fixture
def seeded(r):
    """Three students on one team with a handful of tasks."""
    students = [
        {
            "student_id": "S001", "name": "Aoi", "MBTI": "ENTP",
            "skill_development": 4, "preferred_partners": ["S002"],
            "motivation_score": 3.8, "load_score": 3.0,
        },
        {
            "student_id": "S002", "name": "Ren", "MBTI": "ISTJ",
            "avoided_partners": ["S003"],
            "motivation_score": 1.5, "load_score": 4.5,
        },
        {
            "student_id": "S003", "name": "Mio", "MBTI": "INFP",
            "motivation_score": 2.0, "load_score": 2.0,
        },
    ]
    for s in students:
        save_student(s, r)
    for t in [
        {"task_id": "T1", "assignee_id": "S001", "status": "completed", "difficulty": 3, "category": "planning"},
        {"task_id": "T2", "assignee_id": ["S001", "S002"], "status": "in_progress", "difficulty": 5, "category": "development"},
        {"task_id": "T3", "assignee_id": "S002", "status": "pending", "difficulty": 2, "category": "analysis"},
    ]:
        save_task(t, r)
    save_team({"team_id": "TEAM-A", "students": [{"student_id": "S001"}, {"student_id": "S002"}, {"student_id": "S003"}]}, r)
    return students
