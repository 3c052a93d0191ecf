"""FastAPI server exposing the motivation engine to the team dashboard.

REST endpoints for check-ins, skill self-assessments, the per-student
motivation view, the daily reporting cycle and the alert-zone dashboard.
Records live in Redis; submissions are mirrored to Airtable when configured.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Literal, Optional

import redis
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from teampulse.config.settings import DEFAULT_HISTORICAL_AVERAGE, REDIS_URL
from teampulse.engine.aggregator import aggregate
from teampulse.engine.alert_zones import group_by_zone
from teampulse.engine.change_detector import detect_change
from teampulse.engine.recommendation import generate_recommendation
from teampulse.models.records import ActivityData, CheckIn, CheckInFactors, parse_date
from teampulse.models.results import ScoreResult
from teampulse.services.airtable_mirror import get_airtable_mirror
from teampulse.store.records import (
    append_score,
    get_check_ins,
    get_skill_assessments,
    get_student,
    get_tasks_for_student,
    list_students,
    load_compatibility,
    load_profile,
    recent_check_ins,
    recent_scores,
    save_check_in,
    save_skill_assessment,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="TeamPulse", description="Motivation tracking for student project teams")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_redis() -> redis.Redis:
    return redis.Redis.from_url(REDIS_URL, decode_responses=True)


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _not_found(student_id: str) -> JSONResponse:
    return JSONResponse({"error": "Student not found", "student_id": student_id}, status_code=404)


def _historical_average(student: dict) -> float:
    return float(student.get("motivation_score") or DEFAULT_HISTORICAL_AVERAGE)


def _score_student(student: dict, as_of: date, r: redis.Redis) -> tuple[ScoreResult, list[CheckIn]]:
    """Gather one student's records and run the aggregator."""
    profile = load_profile(student, r)
    tasks = get_tasks_for_student(profile.student_id, r)
    compatibility = load_compatibility(profile, r)
    window = recent_check_ins(get_check_ins(profile.student_id, r), as_of)
    activity = ActivityData.from_dict(student["activity"]) if student.get("activity") else None
    result = aggregate(profile, tasks, compatibility, window, activity, as_of=as_of)
    return result, window


# ── Health ───────────────────────────────────────────────────────────────

@app.get("/api/health")
async def health():
    r = _get_redis()
    try:
        students = r.scard("students")
        redis_ok = True
    except redis.RedisError:
        students = 0
        redis_ok = False

    return {"status": "ok", "redis": redis_ok, "students": students}


# ── Motivation ───────────────────────────────────────────────────────────

@app.get("/api/students/{student_id}/motivation-enhanced")
async def get_motivation_enhanced(student_id: str, as_of: Optional[str] = Query(None)):
    """Motivation score, change detection and recommendation for one student.

    The change detector runs over the motivation scores of the check-in
    window, against the student's stored motivation score as baseline.
    """
    r = _get_redis()
    student = get_student(student_id, r)
    if not student:
        return _not_found(student_id)

    try:
        day = parse_date(as_of) if as_of else _today()
    except ValueError:
        return JSONResponse({"error": "as_of must be an ISO date", "as_of": as_of}, status_code=400)
    result, window = _score_student(student, day, r)
    baseline = _historical_average(student)
    change = detect_change([c.motivation_score for c in window], baseline)

    return {
        "student_id": student_id,
        "motivation_score": result.score,
        "confidence": result.confidence,
        "breakdown": result.breakdown,
        "checkin_count": len(window),
        "historical_average": baseline,
        "change_detection": change.to_dict(),
        "recommendation": generate_recommendation(result, change),
    }


# ── Check-ins ────────────────────────────────────────────────────────────

SentimentValue = Literal["positive", "neutral", "negative"]


class CheckInFactorsRequest(BaseModel):
    task_progress: SentimentValue = "neutral"
    team_communication: SentimentValue = "neutral"
    personal_issues: Literal["none", "minor", "major"] = "none"


class CheckInRequest(BaseModel):
    student_id: str = Field(min_length=1)
    date: str
    motivation_score: float = Field(ge=1, le=5)
    energy_level: float = Field(3.0, ge=1, le=5)
    stress_level: float = Field(3.0, ge=1, le=5)
    factors: CheckInFactorsRequest = Field(default_factory=CheckInFactorsRequest)

    @field_validator("date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        return parse_date(value).isoformat()


@app.get("/api/checkins")
async def list_check_ins(student_id: Optional[str] = Query(None)):
    if not student_id:
        return JSONResponse({"error": "student_id is required"}, status_code=400)
    r = _get_redis()
    return {"student_id": student_id, "checkins": [c.to_dict() for c in get_check_ins(student_id, r)]}


@app.post("/api/checkins")
async def submit_check_in(req: CheckInRequest):
    r = _get_redis()
    if not get_student(req.student_id, r):
        return _not_found(req.student_id)

    check_in = CheckIn(
        date=parse_date(req.date),
        motivation_score=req.motivation_score,
        energy_level=req.energy_level,
        stress_level=req.stress_level,
        factors=CheckInFactors(
            task_progress=req.factors.task_progress,
            team_communication=req.factors.team_communication,
            personal_issues=req.factors.personal_issues,
        ),
    )
    save_check_in(req.student_id, check_in, r)
    mirrored = await get_airtable_mirror().mirror_check_in(req.student_id, check_in)
    logger.info("Check-in stored for %s on %s", req.student_id, req.date)

    return {"success": True, "checkin": check_in.to_dict(), "mirrored": mirrored}


# ── Skill assessments ────────────────────────────────────────────────────

class SkillScore(BaseModel):
    skill: str = Field(min_length=1)
    score: float = Field(ge=1, le=5)
    confidence: float = Field(ge=1, le=5)
    reason: Optional[str] = None


class SkillAssessmentRequest(BaseModel):
    student_id: str = Field(min_length=1)
    date: str
    skills: list[SkillScore]
    is_initial: bool = False

    @field_validator("date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        return parse_date(value).isoformat()


@app.get("/api/skill-assessments")
async def list_skill_assessments(student_id: Optional[str] = Query(None)):
    if not student_id:
        return JSONResponse({"error": "student_id is required"}, status_code=400)
    r = _get_redis()
    return get_skill_assessments(student_id, r)


@app.post("/api/skill-assessments")
async def submit_skill_assessment(req: SkillAssessmentRequest):
    r = _get_redis()
    record = req.model_dump(exclude_none=True)
    save_skill_assessment(record, r)
    mirrored = await get_airtable_mirror().mirror_skill_assessment(record)
    logger.info("Skill assessment stored for %s on %s (%d skills)",
                req.student_id, req.date, len(req.skills))

    return {"success": True, "assessment": record, "mirrored": mirrored}


# ── Reporting cycle ──────────────────────────────────────────────────────

class ReportRunRequest(BaseModel):
    as_of: Optional[str] = None

    @field_validator("as_of")
    @classmethod
    def _iso_date(cls, value: Optional[str]) -> Optional[str]:
        return parse_date(value).isoformat() if value else value


@app.post("/api/reports/run")
async def run_reports(req: Optional[ReportRunRequest] = None):
    """Score every student, record the score and classify the score history."""
    r = _get_redis()
    day = parse_date(req.as_of) if req and req.as_of else _today()

    reports = []
    for student in list_students(r):
        student_id = student["student_id"]
        result, _ = _score_student(student, day, r)
        history = append_score(student_id, day, result.score, result.confidence, r)
        change = detect_change(recent_scores(history, day), _historical_average(student))
        reports.append({
            "student_id": student_id,
            "motivation_score": result.score,
            "confidence": result.confidence,
            "change_detection": change.to_dict(),
            "recommendation": generate_recommendation(result, change),
        })
        if change.is_declining:
            logger.warning("Motivation %s for %s (magnitude %.1f)",
                           change.change_type, student_id, change.magnitude)

    logger.info("Reporting cycle for %s scored %d students", day.isoformat(), len(reports))
    return {"date": day.isoformat(), "reports": reports}


# ── Dashboard ────────────────────────────────────────────────────────────

def _zone_summary(student: dict) -> dict:
    return {
        "student_id": student["student_id"],
        "name": student.get("name", ""),
        "motivation_score": float(student.get("motivation_score") or DEFAULT_HISTORICAL_AVERAGE),
        "load_score": float(student.get("load_score") or 0.0),
        "danger_score": float(student.get("danger_score") or 0.0),
    }


@app.get("/api/dashboard/zones")
async def get_dashboard_zones():
    r = _get_redis()
    zones = group_by_zone(list_students(r))
    return {zone: [_zone_summary(s) for s in members] for zone, members in zones.items()}
