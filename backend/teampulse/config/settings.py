"""Application-wide configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Redis
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")

# Data directory containing the seed JSON files
DATA_DIR: Path = Path(
    os.getenv("DATA_DIR", str(Path(__file__).resolve().parent.parent.parent / "data"))
)

# File names inside DATA_DIR
STUDENTS_FILE: str = "students.json"
TASKS_FILE: str = "tasks.json"
TEAMS_FILE: str = "teams.json"
CHECKINS_DIR: str = "checkins"

# ── Motivation Engine ────────────────────────────────────────────────────

# Trailing window of check-ins handed to the aggregator
CHECKIN_WINDOW_DAYS: int = int(os.getenv("CHECKIN_WINDOW_DAYS", "14"))

# Baseline used when a student record carries no stored motivation score
DEFAULT_HISTORICAL_AVERAGE: float = float(os.getenv("DEFAULT_HISTORICAL_AVERAGE", "3.0"))

# Number of reporting-cycle scores kept per student
SCORE_HISTORY_LIMIT: int = int(os.getenv("SCORE_HISTORY_LIMIT", "30"))

# ── Airtable Mirror ──────────────────────────────────────────────────────

AIRTABLE_API_KEY: str = os.getenv("AIRTABLE_API_KEY", "")
AIRTABLE_BASE_ID: str = os.getenv("AIRTABLE_BASE_ID", "")
AIRTABLE_API_URL: str = os.getenv("AIRTABLE_API_URL", "https://api.airtable.com/v0")
AIRTABLE_CHECKINS_TABLE: str = os.getenv("AIRTABLE_CHECKINS_TABLE", "CheckIns")
AIRTABLE_SKILLS_TABLE: str = os.getenv("AIRTABLE_SKILLS_TABLE", "SkillAssessments")

# ── Server Configuration ─────────────────────────────────────────────────

SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))
