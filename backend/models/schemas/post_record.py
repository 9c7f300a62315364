"""A single post inside a multi-post notification."""

from pydantic import BaseModel, ConfigDict, StrictStr
from pydantic.alias_generators import to_camel


class PostRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    post_name: StrictStr
    vacancies: int | None = None
    eligibility: str | None = None
    pay_level: str | None = None
    age_limit: str | None = None
