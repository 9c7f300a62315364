"""Two-phase validation of a candidate extraction result.

Phase 1 (structural): the candidate must fit ExtractionResult exactly: required
groups, strict types, enums, ranges, date pattern, no keys outside the
allow-lists (hallucinated or injected fields are rejected, not dropped).

Phase 2 (business): cross-field rules a type cannot express: salary and age
ordering, vacancy category sum vs. total (20% overrun tolerated), calendar
validity of every date, aiInsights bounds.

Both phases always run and every violation is reported, so one call returns
the complete defect list. Pure: no I/O, input is never modified.
"""

import re
from datetime import date
from typing import Any

from pydantic import ValidationError

from models.schemas.extraction_result import (
    COMPETITION_LEVELS,
    DATE_PATTERN,
    PREPARATION_TIMES,
    ExtractionResult,
)
from models.schemas.run_record import ErrorKind
from models.schemas.validation_report import ValidationReport

VACANCY_TOLERANCE = 1.2
VACANCY_CATEGORIES = ("general", "obc", "sc", "st", "ews")
DATE_FIELDS = (
    ("jobInfo", "notificationDate"),
    ("importantDates", "applicationStartDate"),
    ("importantDates", "applicationLastDate"),
    ("importantDates", "feePaymentLastDate"),
    ("importantDates", "admitCardDate"),
    ("importantDates", "examDate"),
    ("importantDates", "resultDate"),
)
SUMMARY_LENGTH = (100, 400)
DIFFICULTY_RANGE = (1, 10)

_DATE_RE = re.compile(DATE_PATTERN)


def validate(candidate: Any) -> ValidationReport:
    """Validate a raw (JSON-decoded) candidate result."""
    structural = schema_errors(candidate)
    business = business_rule_errors(candidate)
    errors = structural + business

    if not errors:
        return ValidationReport(valid=True)
    kind = ErrorKind.MALFORMED if structural else ErrorKind.BUSINESS_RULE_VIOLATION
    return ValidationReport(valid=False, errors=errors, error_kind=kind)


def schema_errors(candidate: Any) -> list[str]:
    """Phase 1: every structural violation as ``"<path> <message>"``."""
    try:
        ExtractionResult.model_validate(candidate)
    except ValidationError as e:
        return [f"{_format_loc(err['loc'])} {err['msg']}" for err in e.errors(include_url=False)]
    return []


def business_rule_errors(candidate: Any) -> list[str]:
    """Phase 2: cross-field rules, evaluated on whatever parts are present."""
    if not isinstance(candidate, dict):
        return []

    errors: list[str] = []

    salary = _group(candidate, "salary")
    minimum, maximum = _number(salary.get("minimum")), _number(salary.get("maximum"))
    if minimum is not None and maximum is not None and maximum < minimum:
        errors.append(f"salary.maximum ({maximum:g}) must be >= salary.minimum ({minimum:g})")

    age = _group(candidate, "ageCriteria")
    min_age, max_age = _number(age.get("minimumAge")), _number(age.get("maximumAge"))
    if min_age is not None and max_age is not None and max_age < min_age:
        errors.append(
            f"ageCriteria.maximumAge ({max_age:g}) must be >= ageCriteria.minimumAge ({min_age:g})"
        )

    for group_name, field in DATE_FIELDS:
        value = _group(candidate, group_name).get(field)
        if value is not None and not _is_iso_date(value):
            errors.append(f"{group_name}.{field} must be YYYY-MM-DD, got: {value!r}")

    vacancies = _group(candidate, "vacancies")
    total = _number(vacancies.get("total"))
    if total is not None:
        category_sum = sum(_number(vacancies.get(k)) or 0 for k in VACANCY_CATEGORIES)
        if category_sum > total * VACANCY_TOLERANCE:
            errors.append(
                f"vacancies: category sum ({category_sum:g}) exceeds total ({total:g}) by >20%"
            )

    errors.extend(_insight_errors(_group(candidate, "aiInsights")))
    return errors


def _insight_errors(insights: dict) -> list[str]:
    errors = []

    score = insights.get("difficultyScore")
    lo, hi = DIFFICULTY_RANGE
    if _number(score) is None or not lo <= score <= hi:
        errors.append(f"aiInsights.difficultyScore must be between {lo} and {hi}, got: {score!r}")

    level = insights.get("competitionLevel")
    if level not in COMPETITION_LEVELS:
        errors.append(f"aiInsights.competitionLevel must be one of {', '.join(COMPETITION_LEVELS)}, got: {level!r}")

    prep = insights.get("estimatedPreparationTime")
    if prep not in PREPARATION_TIMES:
        errors.append(
            f"aiInsights.estimatedPreparationTime must be one of {', '.join(PREPARATION_TIMES)}, got: {prep!r}"
        )

    summary = insights.get("shortSummary")
    lo, hi = SUMMARY_LENGTH
    if not isinstance(summary, str) or not lo <= len(summary) <= hi:
        length = len(summary) if isinstance(summary, str) else None
        errors.append(f"aiInsights.shortSummary must be {lo}-{hi} characters, got length: {length}")

    return errors


def _group(candidate: dict, name: str) -> dict:
    value = candidate.get(name)
    return value if isinstance(value, dict) else {}


def _number(value: Any) -> int | float | None:
    """Numeric value or None; booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _is_iso_date(value: Any) -> bool:
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _format_loc(loc: tuple) -> str:
    """('selectionProcess', 0, 'stage') -> 'selectionProcess[0].stage'."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "(root)"
