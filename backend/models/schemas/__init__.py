"""Pydantic contracts for the parsing engine."""

from models.schemas.chunk import ChunkExtraction, ChunkRequest
from models.schemas.extraction_result import ExtractionResult
from models.schemas.parse_outcome import (
    ParseContext,
    ParseFailed,
    ParseManualReview,
    ParseOutcome,
    ParseSuccess,
)
from models.schemas.post_record import PostRecord
from models.schemas.run_record import ErrorKind, RunRecord, RunStatus
from models.schemas.validation_report import ValidationReport

__all__ = [
    "ChunkExtraction",
    "ChunkRequest",
    "ErrorKind",
    "ExtractionResult",
    "ParseContext",
    "ParseFailed",
    "ParseManualReview",
    "ParseOutcome",
    "ParseSuccess",
    "PostRecord",
    "RunRecord",
    "RunStatus",
    "ValidationReport",
]
