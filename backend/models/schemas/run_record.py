"""Audit record written once per parsing run, whatever the outcome."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RunStatus(str, Enum):
    SUCCESS = "success"
    MANUAL_REVIEW = "manual_review_required"
    FAILED = "failed"


class ErrorKind(str, Enum):
    INPUT_TOO_SHORT = "input_too_short"
    TRANSIENT = "transient"
    MALFORMED = "malformed"
    BUSINESS_RULE_VIOLATION = "business_rule_violation"


class ParsedSummary(BaseModel):
    """Compact view of a result; the full record lives with the job document."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    has_title: bool = False
    has_vacancies: bool = False
    has_dates: bool = False
    has_salary: bool = False
    difficulty_score: int | float | None = None
    competition_level: str | None = None


class RunRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    run_id: str
    job_id: str | None = None
    source_id: str | None = None
    status: RunStatus
    error_kind: ErrorKind | None = None
    error_message: str | None = None
    duration_ms: int = 0
    tokens_used: int = 0
    attempts: int = 0
    chunks_processed: int = 0
    model: str = ""
    is_corrigendum: bool = False
    summarized_result: ParsedSummary | None = None
    parsed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
