import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_audit_sink, get_document_store, get_run_controller
from config import settings
from models.requests import ParseRequest, ValidateRequest
from models.responses import HealthResponse, ParseResponse
from models.schemas.parse_outcome import ParseContext, ParseSuccess
from models.schemas.run_record import RunRecord
from models.schemas.validation_report import ValidationReport
from services.audit import AuditSink
from services.job_mapper import build_job_document, build_review_update
from services.job_store import DocumentStore
from services.pipeline import validator
from services.pipeline.orchestrator import RunController

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        status="ok",
        gemini_configured=bool(settings.gemini_api_key),
        model=settings.gemini_model,
    )


@router.post("/parse", response_model=ParseResponse)
@limiter.limit(settings.parse_rate_limit)
async def parse(
    request: Request,
    body: ParseRequest,
    controller: RunController = Depends(get_run_controller),
    store: DocumentStore = Depends(get_document_store),
):
    if not body.text.strip():
        raise HTTPException(status_code=400, detail="Notification text is empty")

    context = ParseContext(
        source_id=body.source_id,
        job_id=body.job_id,
        category=body.category,
        source_url=body.source_url,
    )
    outcome = await controller.parse(body.text, context)

    # Without a job id there is nothing to store under; the caller keeps the outcome
    stored = False
    if body.job_id:
        if isinstance(outcome, ParseSuccess):
            await store.set(body.job_id, build_job_document(outcome, context))
        else:
            await store.update(body.job_id, build_review_update(outcome, context))
        stored = True
        logger.info("Job %s stored (%s)", body.job_id, outcome.status)

    return ParseResponse(outcome=outcome, job_id=body.job_id, stored=stored)


@router.post("/validate", response_model=ValidationReport)
async def validate(body: ValidateRequest):
    return validator.validate(body.result)


@router.get("/runs/{run_id}", response_model=RunRecord)
async def get_run(run_id: str, sink: AuditSink = Depends(get_audit_sink)):
    record = await sink.get(run_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Run {run_id} not found")
    return record
