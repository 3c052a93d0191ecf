"""Redis-backed record store for students, tasks, teams and check-ins.

Records are kept as the JSON documents the rest of the app exchanges:

    student:{id}                 JSON      students          set of ids
    task:{id}                    JSON      tasks             set of ids
    team:{id}                    JSON      teams             set of ids
    checkins:{student_id}        hash  date -> JSON (one check-in per day)
    skill_assessments:{id}       hash  date -> JSON
    score_history:{student_id}   JSON list of {"date", "score", "confidence"}
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timedelta
from typing import Any, Optional

import redis

from teampulse.config.settings import CHECKIN_WINDOW_DAYS, REDIS_URL, SCORE_HISTORY_LIMIT
from teampulse.models.records import CheckIn, Profile, Task, TeamCompatibility, parse_date

logger = logging.getLogger(__name__)

STUDENT_PREFIX = "student:"
STUDENTS_KEY = "students"
TASK_PREFIX = "task:"
TASKS_KEY = "tasks"
TEAM_PREFIX = "team:"
TEAMS_KEY = "teams"
CHECKIN_PREFIX = "checkins:"
SKILL_ASSESSMENT_PREFIX = "skill_assessments:"
SCORE_HISTORY_PREFIX = "score_history:"


def _get_redis() -> redis.Redis:
    return redis.Redis.from_url(REDIS_URL, decode_responses=True)


def _load(r: redis.Redis, key: str) -> Optional[dict]:
    raw = r.get(key)
    return json.loads(raw) if raw else None


# ── Students ─────────────────────────────────────────────────────────────

def save_student(record: dict, r: redis.Redis | None = None) -> None:
    r = r or _get_redis()
    student_id = record["student_id"]
    r.set(f"{STUDENT_PREFIX}{student_id}", json.dumps(record))
    r.sadd(STUDENTS_KEY, student_id)


def get_student(student_id: str, r: redis.Redis | None = None) -> Optional[dict]:
    r = r or _get_redis()
    return _load(r, f"{STUDENT_PREFIX}{student_id}")


def list_students(r: redis.Redis | None = None) -> list[dict]:
    r = r or _get_redis()
    students = []
    for sid in sorted(r.smembers(STUDENTS_KEY)):
        record = get_student(sid, r)
        if record:
            students.append(record)
    return students


# ── Tasks ────────────────────────────────────────────────────────────────

def save_task(record: dict, r: redis.Redis | None = None) -> None:
    r = r or _get_redis()
    task_id = record["task_id"]
    r.set(f"{TASK_PREFIX}{task_id}", json.dumps(record))
    r.sadd(TASKS_KEY, task_id)


def _is_assigned(record: dict, student_id: str) -> bool:
    assignee = record.get("assignee_id")
    if isinstance(assignee, list):
        return student_id in assignee
    return assignee == student_id


def get_tasks_for_student(student_id: str, r: redis.Redis | None = None) -> list[Task]:
    """All tasks assigned to ``student_id`` (single or shared assignment)."""
    r = r or _get_redis()
    tasks = []
    for tid in sorted(r.smembers(TASKS_KEY)):
        record = _load(r, f"{TASK_PREFIX}{tid}")
        if record and _is_assigned(record, student_id):
            tasks.append(Task.from_dict(record))
    return tasks


# ── Teams ────────────────────────────────────────────────────────────────

def save_team(record: dict, r: redis.Redis | None = None) -> None:
    r = r or _get_redis()
    team_id = record["team_id"]
    r.set(f"{TEAM_PREFIX}{team_id}", json.dumps(record))
    r.sadd(TEAMS_KEY, team_id)


def _member_ids(team: dict) -> list[str]:
    return [
        m["student_id"] if isinstance(m, dict) else m
        for m in team.get("students", [])
    ]


def get_teammate_ids(student_id: str, r: redis.Redis | None = None) -> list[str]:
    """Member ids of the first team containing ``student_id`` (empty if none)."""
    r = r or _get_redis()
    for team_id in sorted(r.smembers(TEAMS_KEY)):
        team = _load(r, f"{TEAM_PREFIX}{team_id}")
        if team and student_id in _member_ids(team):
            return _member_ids(team)
    return []


# ── Check-ins ────────────────────────────────────────────────────────────

def save_check_in(student_id: str, check_in: CheckIn, r: redis.Redis | None = None) -> None:
    """Store a check-in; a second submission for the same date replaces the first."""
    r = r or _get_redis()
    r.hset(f"{CHECKIN_PREFIX}{student_id}", check_in.date.isoformat(), json.dumps(check_in.to_dict()))


def get_check_ins(student_id: str, r: redis.Redis | None = None) -> list[CheckIn]:
    """All check-ins for a student, ordered by date ascending."""
    r = r or _get_redis()
    raw = r.hgetall(f"{CHECKIN_PREFIX}{student_id}")
    check_ins = []
    for payload in raw.values():
        try:
            check_ins.append(CheckIn.from_dict(json.loads(payload)))
        except (KeyError, ValueError) as exc:
            logger.warning("Skipping malformed check-in for %s: %s", student_id, exc)
    check_ins.sort(key=lambda c: c.date)
    return check_ins


def recent_check_ins(
    check_ins: list[CheckIn],
    as_of: date | datetime,
    window_days: int = CHECKIN_WINDOW_DAYS,
) -> list[CheckIn]:
    """Check-ins from the ``window_days`` days ending on ``as_of``, oldest first.

    Entries dated after ``as_of`` are left out. Duplicate dates keep the
    last entry in input order.
    """
    if isinstance(as_of, datetime):
        as_of = as_of.date()
    cutoff = as_of - timedelta(days=window_days)
    by_date: dict[date, CheckIn] = {}
    for check_in in check_ins:
        if cutoff < check_in.date <= as_of:
            by_date[check_in.date] = check_in
    return [by_date[d] for d in sorted(by_date)]


# ── Skill assessments ────────────────────────────────────────────────────

def save_skill_assessment(record: dict, r: redis.Redis | None = None) -> None:
    """Store an assessment; same-date submissions replace the earlier one."""
    r = r or _get_redis()
    r.hset(f"{SKILL_ASSESSMENT_PREFIX}{record['student_id']}", record["date"], json.dumps(record))


def get_skill_assessments(student_id: str, r: redis.Redis | None = None) -> list[dict]:
    r = r or _get_redis()
    raw = r.hgetall(f"{SKILL_ASSESSMENT_PREFIX}{student_id}")
    assessments = [json.loads(v) for v in raw.values()]
    assessments.sort(key=lambda a: parse_date(a["date"]))
    return assessments


def latest_skill_ratings(student_id: str, r: redis.Redis | None = None) -> dict[str, float]:
    assessments = get_skill_assessments(student_id, r)
    if not assessments:
        return {}
    return {s["skill"]: float(s["score"]) for s in assessments[-1].get("skills", [])}


# ── Engine inputs ────────────────────────────────────────────────────────

def load_profile(student: dict, r: redis.Redis | None = None) -> Profile:
    """Profile from the student record, overlaid with the latest self-assessment."""
    profile = Profile.from_dict(student)
    assessed = latest_skill_ratings(profile.student_id, r)
    if not assessed:
        return profile
    skills = dict(profile.skills)
    skills.update(assessed)
    return Profile(
        student_id=profile.student_id,
        trait_code=profile.trait_code,
        skills=skills,
        strengths=profile.strengths,
        weaknesses=profile.weaknesses,
        preferred_partners=profile.preferred_partners,
        avoided_partners=profile.avoided_partners,
    )


def load_compatibility(profile: Profile, r: redis.Redis | None = None) -> TeamCompatibility:
    return TeamCompatibility.for_profile(profile, get_teammate_ids(profile.student_id, r))


# ── Score history ────────────────────────────────────────────────────────

def append_score(
    student_id: str,
    day: date,
    score: float,
    confidence: float,
    r: redis.Redis | None = None,
    limit: int = SCORE_HISTORY_LIMIT,
) -> list[dict[str, Any]]:
    """Record one reporting-cycle score (replacing any entry for ``day``)."""
    r = r or _get_redis()
    history = [h for h in get_score_history(student_id, r) if h["date"] != day.isoformat()]
    history.append({"date": day.isoformat(), "score": score, "confidence": confidence})
    history.sort(key=lambda h: h["date"])
    history = history[-limit:]
    r.set(f"{SCORE_HISTORY_PREFIX}{student_id}", json.dumps(history))
    return history


def get_score_history(student_id: str, r: redis.Redis | None = None) -> list[dict[str, Any]]:
    r = r or _get_redis()
    raw = r.get(f"{SCORE_HISTORY_PREFIX}{student_id}")
    return json.loads(raw) if raw else []


def recent_scores(
    history: list[dict[str, Any]],
    as_of: date,
    window_days: int = CHECKIN_WINDOW_DAYS,
) -> list[float]:
    """History scores from the ``window_days`` days ending on ``as_of``, oldest first."""
    cutoff = as_of - timedelta(days=window_days)
    return [h["score"] for h in history if cutoff < parse_date(h["date"]) <= as_of]
