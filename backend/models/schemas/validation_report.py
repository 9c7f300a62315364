"""Validator output: the complete defect list for one candidate."""

from pydantic import BaseModel

from models.schemas.run_record import ErrorKind


class ValidationReport(BaseModel):
    valid: bool
    errors: list[str] = []
    error_kind: ErrorKind | None = None  # malformed if any structural error, else business_rule_violation
