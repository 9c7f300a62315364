"""Canonical structured job record extracted from a notification.

Field names follow Python conventions; the wire/JSON form uses the camelCase
aliases the extraction prompt asks for (``jobInfo``, ``officialPDFLink``, ...).
Every group forbids keys outside its allow-list, and scalar fields are strict
so that ``"5"`` is never accepted as a number.
"""

from typing import Annotated, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    StringConstraints,
)
from pydantic.alias_generators import to_camel

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

COMPETITION_LEVELS = ("Low", "Medium", "High")
PREPARATION_TIMES = ("1–2 months", "3–4 months", "6+ months")

OptStr = Optional[StrictStr]
OptDate = Optional[Annotated[StrictStr, StringConstraints(pattern=DATE_PATTERN)]]
OptCount = Optional[Annotated[StrictInt, Field(ge=0)]]
OptAmount = Optional[Annotated[StrictFloat, Field(ge=0)]]
OptMode = Optional[Literal["Online", "Offline", "Both"]]


class _Group(BaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, allow_inf_nan=False)


class JobInfo(_Group):
    title: OptStr  # key required, value nullable
    department: OptStr = None
    organization: OptStr
    advertisement_number: OptStr = None
    notification_date: OptDate = None
    location: OptStr = None
    state: OptStr = None
    is_national: Optional[StrictBool] = None
    official_website: OptStr = None
    official_pdf_link: OptStr = Field(default=None, alias="officialPDFLink")
    application_mode: OptMode = None
    category: OptStr = None
    sub_category: OptStr = None


class Vacancies(_Group):
    total: OptCount = None
    general: OptCount = None
    obc: OptCount = None
    sc: OptCount = None
    st: OptCount = None
    ews: OptCount = None
    pwbd: OptCount = None
    ex_servicemen: OptCount = None
    notes: OptStr = None


class Salary(_Group):
    minimum: OptAmount = None
    maximum: OptAmount = None
    pay_level: OptStr = None
    grade_pay: OptStr = None
    allowances: OptStr = None
    raw_text: OptStr = None


class Eligibility(_Group):
    qualification_required: OptStr = None
    stream_or_discipline: OptStr = None
    experience_required: OptStr = None
    minimum_percentage: Optional[Annotated[StrictFloat, Field(ge=0, le=100)]] = None
    additional_requirements: OptStr = None


class AgeRelaxation(_Group):
    obc: Optional[StrictInt] = None
    sc_st: Optional[StrictInt] = None
    pwbd: Optional[StrictInt] = None
    ex_servicemen: Optional[StrictInt] = None
    other_relaxation: OptStr = None


class AgeCriteria(_Group):
    minimum_age: Optional[Annotated[StrictInt, Field(ge=14)]] = None
    maximum_age: Optional[Annotated[StrictInt, Field(ge=14, le=65)]] = None
    relaxation: Optional[AgeRelaxation] = None


class ApplicationFees(_Group):
    general: OptAmount = None
    obc: OptAmount = None
    sc_st: OptAmount = None
    female: OptAmount = None
    pwbd: OptAmount = None
    payment_mode: OptStr = None


class ImportantDates(_Group):
    application_start_date: OptDate = None
    application_last_date: OptDate = None
    fee_payment_last_date: OptDate = None
    admit_card_date: OptDate = None
    exam_date: OptDate = None
    result_date: OptDate = None


class SelectionStage(_Group):
    stage: Annotated[StrictInt, Field(ge=1)]
    name: StrictStr
    description: OptStr = None


class SyllabusItem(_Group):
    subject: StrictStr
    topics: list[StrictStr] = []


class ExamSection(_Group):
    name: StrictStr
    questions: Optional[StrictInt] = None
    marks: Optional[StrictFloat] = None


class ExamPattern(_Group):
    number_of_papers: Optional[Annotated[StrictInt, Field(ge=1)]] = None
    total_questions: OptCount = None
    total_marks: OptAmount = None
    duration_minutes: OptCount = None
    negative_marking: OptAmount = None
    mode: OptMode = None
    sections: list[ExamSection] = []


class AIInsights(_Group):
    short_summary: Annotated[StrictStr, StringConstraints(min_length=100, max_length=400)]
    difficulty_score: Annotated[StrictInt, Field(ge=1, le=10)]
    competition_level: Literal["Low", "Medium", "High"]
    estimated_preparation_time: Literal["1–2 months", "3–4 months", "6+ months"]
    recommended_strategy: Annotated[StrictStr, StringConstraints(min_length=50)]


class ExtractionResult(_Group):
    """Validated job record. Produced only after both validation phases pass."""
    job_info: JobInfo
    vacancies: Vacancies
    salary: Salary
    eligibility: Eligibility
    age_criteria: AgeCriteria
    application_fees: ApplicationFees
    important_dates: ImportantDates
    selection_process: list[SelectionStage]
    syllabus: list[SyllabusItem]
    exam_pattern: ExamPattern
    required_documents: list[StrictStr]
    multiple_jobs: StrictBool
    ai_insights: AIInsights

    def to_json_dict(self) -> dict:
        """Dump using the camelCase wire names."""
        return self.model_dump(by_alias=True)
