"""Fold per-chunk extraction results into one result.

Strategy, applied left to right over chunks in document order:
    jobInfo, eligibility        per field, first non-null wins
    vacancies                   group from the chunk with the highest total
    salary, ageCriteria,
    applicationFees, examPattern  first chunk with the anchor field wins the group
    importantDates              per field, last non-null wins
    selectionProcess, syllabus,
    requiredDocuments           union, de-duplicated; stages sorted by number
    aiInsights                  first chunk; difficultyScore averaged over all chunks
    multipleJobs                true if any chunk says so

Order matters (first/last wins), so callers must pass results sorted by chunk
index, not by completion time. Inputs are never mutated.
"""

import copy
import logging
import math
from typing import Any

logger = logging.getLogger(__name__)

# group → field whose presence marks the chunk that holds the real table
_ANCHORED_GROUPS = {
    "salary": "minimum",
    "ageCriteria": "minimumAge",
    "applicationFees": "general",
    "examPattern": "totalQuestions",
}

# list group → key used for de-duplication (None: the item itself)
_UNION_GROUPS = {
    "selectionProcess": "name",
    "syllabus": "subject",
    "requiredDocuments": None,
}


def merge_chunk_results(results: list[dict[str, Any]]) -> dict[str, Any]:
    """Merge a non-empty, document-ordered list of raw chunk results."""
    if not results:
        raise ValueError("merge_chunk_results() needs at least one result")

    merged = copy.deepcopy(results[0])
    if len(results) == 1:
        return merged

    for chunk in results[1:]:
        _merge_first_non_null(merged, chunk, "jobInfo")
        _merge_vacancies(merged, chunk)
        for group, anchor in _ANCHORED_GROUPS.items():
            _merge_anchored(merged, chunk, group, anchor)
        _merge_first_non_null(merged, chunk, "eligibility")
        _merge_last_non_null(merged, chunk, "importantDates")
        for group, key in _UNION_GROUPS.items():
            _merge_union(merged, chunk, group, key)
        if not isinstance(merged.get("aiInsights"), dict) and isinstance(chunk.get("aiInsights"), dict):
            merged["aiInsights"] = copy.deepcopy(chunk["aiInsights"])
        if chunk.get("multipleJobs") is True:
            merged["multipleJobs"] = True

    if isinstance(merged.get("selectionProcess"), list):
        merged["selectionProcess"].sort(key=_stage_number)

    score = average_difficulty(results)
    if score is not None and isinstance(merged.get("aiInsights"), dict):
        merged["aiInsights"]["difficultyScore"] = score

    logger.debug("Merged %d chunk results", len(results))
    return merged


def average_difficulty(results: list[dict[str, Any]]) -> int | None:
    """Arithmetic mean of every reported difficultyScore, rounded half up."""
    scores = []
    for result in results:
        insights = result.get("aiInsights")
        if not isinstance(insights, dict):
            continue
        score = insights.get("difficultyScore")
        if isinstance(score, (int, float)) and not isinstance(score, bool):
            scores.append(score)
    if not scores:
        return None
    return math.floor(sum(scores) / len(scores) + 0.5)


def _dict_group(result: dict, name: str) -> dict | None:
    value = result.get(name)
    return value if isinstance(value, dict) else None


def _merge_first_non_null(merged: dict, chunk: dict, group: str) -> None:
    incoming = _dict_group(chunk, group)
    if incoming is None:
        return
    target = _dict_group(merged, group)
    if target is None:
        merged[group] = copy.deepcopy(incoming)
        return
    for key, value in incoming.items():
        if target.get(key) is None and value is not None:
            target[key] = copy.deepcopy(value)


def _merge_last_non_null(merged: dict, chunk: dict, group: str) -> None:
    incoming = _dict_group(chunk, group)
    if incoming is None:
        return
    target = _dict_group(merged, group)
    if target is None:
        merged[group] = target = {}
    for key, value in incoming.items():
        if value is not None:
            target[key] = copy.deepcopy(value)


def _merge_vacancies(merged: dict, chunk: dict) -> None:
    incoming = _dict_group(chunk, "vacancies")
    if incoming is None:
        return
    current = _dict_group(merged, "vacancies") or {}
    if _total(incoming) > _total(current):
        merged["vacancies"] = copy.deepcopy(incoming)


def _total(vacancies: dict) -> float:
    total = vacancies.get("total")
    if isinstance(total, (int, float)) and not isinstance(total, bool):
        return total
    return 0


def _merge_anchored(merged: dict, chunk: dict, group: str, anchor: str) -> None:
    current = _dict_group(merged, group)
    if current is not None and current.get(anchor) is not None:
        return
    incoming = _dict_group(chunk, group)
    if incoming is not None and incoming.get(anchor) is not None:
        merged[group] = copy.deepcopy(incoming)


def _merge_union(merged: dict, chunk: dict, group: str, key: str | None) -> None:
    incoming = chunk.get(group)
    if not isinstance(incoming, list) or not incoming:
        return
    target = merged.get(group)
    if not isinstance(target, list):
        merged[group] = target = []

    seen = {_identity(item, key) for item in target}
    for item in incoming:
        ident = _identity(item, key)
        if ident not in seen:
            target.append(copy.deepcopy(item))
            seen.add(ident)


def _identity(item: Any, key: str | None) -> Any:
    value = item.get(key) if key and isinstance(item, dict) else item
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value


def _stage_number(stage: Any) -> float:
    number = stage.get("stage") if isinstance(stage, dict) else None
    if isinstance(number, (int, float)) and not isinstance(number, bool):
        return number
    return math.inf
