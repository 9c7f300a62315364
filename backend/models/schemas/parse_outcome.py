"""Terminal outputs of a parsing run.

Three shapes, discriminated by ``status``:
    success                 → validated ExtractionResult (per-post split in meta)
    manual_review_required  → best-effort, *invalid* result plus the violation list
    failed                  → reason only

Anything other than success must be shown to users as needing review.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from models.schemas.extraction_result import ExtractionResult
from models.schemas.post_record import PostRecord
from models.schemas.run_record import RunRecord


class ParseContext(BaseModel):
    """Identifiers supplied by the ingestion collaborator."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    source_id: str | None = None
    job_id: str | None = None
    category: str | None = None
    source_url: str | None = None


class SuccessMeta(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    parsing_run_id: str
    job_id: str | None = None
    source_id: str | None = None
    is_corrigendum: bool = False
    multiple_jobs_data: list[PostRecord] | None = None
    chunks_processed: int = 0
    tokens_used: int = 0
    processing_time_ms: int = 0
    model_version: str = ""
    parsing_status: Literal["success"] = "success"
    parsed_at: datetime


class ParseSuccess(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: Literal["success"] = "success"
    result: ExtractionResult
    meta: SuccessMeta
    audit: RunRecord

    @computed_field
    @property
    def needs_review(self) -> bool:
        return False


class ParseManualReview(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: Literal["manual_review_required"] = "manual_review_required"
    partial_result: dict[str, Any]
    errors: list[str]
    audit: RunRecord

    @computed_field
    @property
    def needs_review(self) -> bool:
        return True


class ParseFailed(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: Literal["failed"] = "failed"
    reason: str
    audit: RunRecord

    @computed_field
    @property
    def needs_review(self) -> bool:
        return True


ParseOutcome = Annotated[
    Union[ParseSuccess, ParseManualReview, ParseFailed],
    Field(discriminator="status"),
]
