"""Shared dependencies for API routes.

Each getter returns a process-wide singleton; tests swap them through
``app.dependency_overrides``.
"""

from functools import lru_cache

from config import ParserConfig, settings
from services.audit import AuditSink, InMemoryAuditSink, JsonlAuditSink
from services.gemini_client import GeminiCompletionService
from services.job_store import DocumentStore, InMemoryDocumentStore
from services.pipeline.orchestrator import RunController


@lru_cache
def get_audit_sink() -> AuditSink:
    if settings.audit_log_path:
        return JsonlAuditSink(settings.audit_log_path)
    return InMemoryAuditSink()


@lru_cache
def get_document_store() -> DocumentStore:
    return InMemoryDocumentStore()


@lru_cache
def get_run_controller() -> RunController:
    config = ParserConfig.from_settings(settings)
    completion = GeminiCompletionService(model=config.model, temperature=config.temperature)
    return RunController(config, completion, get_audit_sink())
