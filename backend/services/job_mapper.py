"""Map parse outcomes onto job documents for the document store."""

import hashlib
from datetime import datetime, timezone
from typing import Any

from models.schemas.extraction_result import ApplicationFees
from models.schemas.parse_outcome import (
    ParseContext,
    ParseFailed,
    ParseManualReview,
    ParseSuccess,
)

_FEE_LABELS = (
    ("general", "General"),
    ("obc", "OBC"),
    ("sc_st", "SC/ST"),
    ("female", "Female"),
)


def title_hash(title: str | None) -> str:
    """SHA-256 of the lower-cased, whitespace-collapsed title (duplicate detection key)."""
    normalized = " ".join((title or "").lower().split())
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def build_fee_string(fees: ApplicationFees | None) -> str | None:
    """'General: ₹500 | OBC: ₹500 | SC/ST: ₹250 | Female: ₹250'; None when no fee is known."""
    if fees is None:
        return None
    parts = []
    for field, label in _FEE_LABELS:
        amount = getattr(fees, field)
        # a zero fee (exempt category) is omitted like a missing one
        if amount:
            parts.append(f"{label}: ₹{_format_amount(amount)}")
    return " | ".join(parts) or None


def _format_amount(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else str(amount)


def build_job_document(outcome: ParseSuccess, context: ParseContext) -> dict[str, Any]:
    """Document for a validated result. New jobs await admin approval (status pending)."""
    result = outcome.result
    meta = outcome.meta
    data = result.to_json_dict()
    info = result.job_info
    dates = result.important_dates
    stamp = meta.parsed_at.isoformat()

    return {
        "titleHash": title_hash(info.title),
        "basicInfo": {
            "title": info.title,
            "organization": info.organization,
            "department": info.department,
            "category": info.category or context.category,
            "subCategory": info.sub_category,
            "state": info.state,
            "vacancies": result.vacancies.total,
            "salary": result.salary.raw_text,
            "jobType": "permanent",
            "isNational": True if info.is_national is None else info.is_national,
        },
        "eligibility": {
            "educationRequired": (
                [result.eligibility.qualification_required]
                if result.eligibility.qualification_required else []
            ),
            "streamOrDiscipline": result.eligibility.stream_or_discipline,
            "ageMin": result.age_criteria.minimum_age,
            "ageMax": result.age_criteria.maximum_age,
            "ageRelaxation": data["ageCriteria"]["relaxation"],
            "experienceRequired": result.eligibility.experience_required,
            "minimumPercentage": result.eligibility.minimum_percentage,
            "nationality": "Indian",
        },
        "importantDates": {
            "notificationDate": info.notification_date,
            "applicationStartDate": dates.application_start_date,
            "lastDate": dates.application_last_date,
            "feePaymentLastDate": dates.fee_payment_last_date,
            "examDate": dates.exam_date,
            "admitCardDate": dates.admit_card_date,
            "resultDate": dates.result_date,
        },
        "applicationDetails": {
            "applicationFee": build_fee_string(result.application_fees),
            "fees": data["applicationFees"],
            "applicationLink": info.official_pdf_link or context.source_url,
            "officialWebsite": info.official_website,
            "officialNotificationPDF": info.official_pdf_link,
            "selectionProcess": data["selectionProcess"],
            "applicationMode": info.application_mode or "Online",
        },
        "vacancies": data["vacancies"],
        "syllabus": data["syllabus"],
        "examPattern": data["examPattern"],
        "requiredDocuments": data["requiredDocuments"],
        "aiSummary": result.ai_insights.short_summary,
        "metadata": {
            "status": "pending",
            "needsReview": False,
            "isCorrigendum": meta.is_corrigendum,
            "hasMultiplePosts": result.multiple_jobs,
            "multiplePostsData": (
                [p.model_dump(by_alias=True) for p in meta.multiple_jobs_data]
                if meta.multiple_jobs_data else None
            ),
            "source": context.source_id,
            "sourceUrl": context.source_url,
            "advertisementNumber": info.advertisement_number,
            "parsingStatus": meta.parsing_status,
            "parsingRunId": meta.parsing_run_id,
            "tokensUsed": meta.tokens_used,
            "modelVersion": meta.model_version,
            "createdAt": stamp,
            "updatedAt": stamp,
        },
        "analytics": {
            "competitionLevel": result.ai_insights.competition_level,
            "difficultyScore": result.ai_insights.difficulty_score,
            "estimatedPreparationTime": result.ai_insights.estimated_preparation_time,
        },
    }


def build_review_update(
    outcome: ParseManualReview | ParseFailed, context: ParseContext
) -> dict[str, Any]:
    """Dotted-path update flagging a job whose run did not produce a validated result."""
    if isinstance(outcome, ParseManualReview):
        problems = outcome.errors
    else:
        problems = [outcome.reason]
    return {
        "metadata.parsingStatus": outcome.status,
        "metadata.needsReview": True,
        "metadata.parsingRunId": outcome.audit.run_id,
        "metadata.parsingErrors": problems,
        "metadata.sourceUrl": context.source_url,
        "metadata.updatedAt": datetime.now(timezone.utc).isoformat(),
    }
