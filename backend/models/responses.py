from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from models.schemas.parse_outcome import ParseOutcome


class ParseResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    outcome: ParseOutcome
    job_id: str | None = None
    stored: bool = False  # document written or flagged in the job store


class HealthResponse(BaseModel):
    status: str = "ok"
    gemini_configured: bool = False
    model: str = ""
