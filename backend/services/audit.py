"""Audit trail: one RunRecord per parsing run, whatever the outcome."""

import asyncio
import logging
import secrets
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from models.schemas.run_record import ParsedSummary, RunRecord

logger = logging.getLogger(__name__)


def new_run_id() -> str:
    """parse_<epoch ms>_<8 hex chars>"""
    return f"parse_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


def summarize_result(result: dict[str, Any] | None) -> ParsedSummary | None:
    """Compact summary of a (possibly invalid) result; the full JSON is not audited."""
    if not isinstance(result, dict):
        return None

    def group(name: str) -> dict:
        value = result.get(name)
        return value if isinstance(value, dict) else {}

    insights = group("aiInsights")
    score = insights.get("difficultyScore")
    level = insights.get("competitionLevel")
    return ParsedSummary(
        has_title=bool(group("jobInfo").get("title")),
        has_vacancies=bool(group("vacancies").get("total")),
        has_dates=bool(group("importantDates").get("applicationLastDate")),
        has_salary=bool(group("salary").get("minimum")),
        difficulty_score=score if isinstance(score, (int, float)) and not isinstance(score, bool) else None,
        competition_level=level if isinstance(level, str) else None,
    )


class AuditSink(ABC):
    """Destination for run records.

    Subclasses must implement write(); get() is optional and returns None
    when the sink cannot read records back.
    """

    @abstractmethod
    async def write(self, record: RunRecord) -> None:
        """Persist one record."""

    async def get(self, run_id: str) -> RunRecord | None:
        return None


class InMemoryAuditSink(AuditSink):
    def __init__(self) -> None:
        self.records: dict[str, RunRecord] = {}

    async def write(self, record: RunRecord) -> None:
        self.records[record.run_id] = record

    async def get(self, run_id: str) -> RunRecord | None:
        return self.records.get(run_id)


class JsonlAuditSink(AuditSink):
    """Append-only JSON-lines file, one camelCase record per line."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def write(self, record: RunRecord) -> None:
        line = record.model_dump_json(by_alias=True)
        await asyncio.to_thread(self._append, line)

    def _append(self, line: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")

    async def get(self, run_id: str) -> RunRecord | None:
        if not self.path.exists():
            return None
        lines = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        for line in reversed(lines.splitlines()):
            if not line.strip():
                continue
            record = RunRecord.model_validate_json(line)
            if record.run_id == run_id:
                return record
        return None
