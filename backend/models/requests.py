from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config import settings


class ParseRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    text: str = Field(..., max_length=settings.max_text_length, description="Raw notification text")
    source_id: str | None = Field(None, description="Scraper source the text came from")
    job_id: str | None = Field(None, description="Document id to store the result under")
    category: str | None = None
    source_url: str | None = None


class ValidateRequest(BaseModel):
    result: dict[str, Any] = Field(..., description="Candidate extraction result (camelCase JSON)")
