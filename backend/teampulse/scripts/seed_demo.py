"""Seed Redis from the JSON data files of the file-based deployment.

Expected layout under DATA_DIR:

    students.json              list of student records
    tasks.json                 list of task records (assignee_id: str | list)
    teams.json                 list of {"team_id", "students": [...]}
    checkins/<student_id>.json list of check-ins for that student

Run: python -m teampulse.scripts.seed_demo (from backend/)
"""

import json
import logging
from pathlib import Path

import redis

from teampulse.config.settings import (
    CHECKINS_DIR,
    DATA_DIR,
    REDIS_URL,
    STUDENTS_FILE,
    TASKS_FILE,
    TEAMS_FILE,
)
from teampulse.models.records import CheckIn
from teampulse.store.records import (
    CHECKIN_PREFIX,
    SCORE_HISTORY_PREFIX,
    SKILL_ASSESSMENT_PREFIX,
    STUDENT_PREFIX,
    STUDENTS_KEY,
    TASK_PREFIX,
    TASKS_KEY,
    TEAM_PREFIX,
    TEAMS_KEY,
    save_check_in,
    save_student,
    save_task,
    save_team,
)

logger = logging.getLogger(__name__)


def clear_records(r: redis.Redis) -> None:
    """Remove all stored records."""
    for prefix in (STUDENT_PREFIX, TASK_PREFIX, TEAM_PREFIX, CHECKIN_PREFIX,
                   SKILL_ASSESSMENT_PREFIX, SCORE_HISTORY_PREFIX):
        for key in r.scan_iter(f"{prefix}*"):
            r.delete(key)
    r.delete(STUDENTS_KEY, TASKS_KEY, TEAMS_KEY)


def _read_list(path: Path) -> list:
    if not path.exists():
        logger.info("No %s, skipping", path.name)
        return []
    return json.loads(path.read_text(encoding="utf-8"))


def seed(data_dir: Path = DATA_DIR, r: redis.Redis | None = None) -> dict:
    """Load every data file into Redis and return per-kind counts."""
    r = r or redis.Redis.from_url(REDIS_URL, decode_responses=True)
    clear_records(r)

    students = _read_list(data_dir / STUDENTS_FILE)
    for student in students:
        save_student(student, r)

    tasks = _read_list(data_dir / TASKS_FILE)
    for task in tasks:
        save_task(task, r)

    teams = _read_list(data_dir / TEAMS_FILE)
    for team in teams:
        save_team(team, r)

    check_in_count = 0
    checkins_dir = data_dir / CHECKINS_DIR
    if checkins_dir.is_dir():
        for path in sorted(checkins_dir.glob("*.json")):
            student_id = path.stem
            for record in _read_list(path):
                save_check_in(student_id, CheckIn.from_dict(record), r)
            # same-date records collapse into one hash field
            check_in_count += r.hlen(f"{CHECKIN_PREFIX}{student_id}")

    counts = {
        "students": len(students),
        "tasks": len(tasks),
        "teams": len(teams),
        "checkins": check_in_count,
    }
    logger.info("Seeded %s from %s", counts, data_dir)
    return counts


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    counts = seed()
    print(f"Seeded {counts['students']} students, {counts['tasks']} tasks, "
          f"{counts['teams']} teams, {counts['checkins']} check-ins")
