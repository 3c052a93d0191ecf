"""Airtable mirror — optional copy of submitted records to a shared base.

Redis stays the source of truth. A mirror failure is logged and reported
as ``False``; it never undoes or blocks the local write.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from teampulse.config.settings import (
    AIRTABLE_API_KEY,
    AIRTABLE_API_URL,
    AIRTABLE_BASE_ID,
    AIRTABLE_CHECKINS_TABLE,
    AIRTABLE_SKILLS_TABLE,
)
from teampulse.models.records import CheckIn

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10.0


class AirtableMirror:
    """Thin wrapper around the Airtable ``create records`` endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        base_id: str | None = None,
        api_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key if api_key is not None else AIRTABLE_API_KEY
        self.base_id = base_id if base_id is not None else AIRTABLE_BASE_ID
        self.api_url = (api_url or AIRTABLE_API_URL).rstrip("/")
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.base_id)

    async def _create(self, table: str, fields: dict[str, Any]) -> bool:
        if not self.enabled:
            return False
        url = f"{self.api_url}/{self.base_id}/{table}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.post(
                    url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={"records": [{"fields": fields}]},
                    timeout=REQUEST_TIMEOUT,
                )
            if resp.status_code >= 400:
                logger.warning("Airtable %s returned %s: %s", table, resp.status_code, resp.text)
                return False
            return True
        except httpx.HTTPError as exc:
            logger.warning("Failed to mirror to Airtable %s: %s", table, exc)
            return False

    async def mirror_check_in(self, student_id: str, check_in: CheckIn) -> bool:
        return await self._create(AIRTABLE_CHECKINS_TABLE, {
            "student_id": student_id,
            "date": check_in.date.isoformat(),
            "motivation_score": check_in.motivation_score,
            "energy_level": check_in.energy_level,
            "stress_level": check_in.stress_level,
            "task_progress": check_in.factors.task_progress,
            "team_communication": check_in.factors.team_communication,
            "personal_issues": check_in.factors.personal_issues,
        })

    async def mirror_skill_assessment(self, record: dict[str, Any]) -> bool:
        fields = {
            "student_id": record["student_id"],
            "date": record["date"],
            "is_initial": bool(record.get("is_initial", False)),
        }
        for skill in record.get("skills", []):
            fields[f"skill_{skill['skill']}"] = skill["score"]
        return await self._create(AIRTABLE_SKILLS_TABLE, fields)


_mirror: Optional[AirtableMirror] = None


def get_airtable_mirror() -> AirtableMirror:
    global _mirror
    if _mirror is None:
        _mirror = AirtableMirror()
        if not _mirror.enabled:
            logger.info("Airtable mirror disabled (AIRTABLE_API_KEY / AIRTABLE_BASE_ID not set)")
    return _mirror
