"""Run controller: drives one notification through the whole pipeline.

Flow:
    raw_text
      ├─ normalize()                     → cleaned text (too short → failed)
      ├─ is_corrigendum()                → flag carried into meta + audit
      ├─ chunk_text()                    → chunks
      │       ↓
      ├─ extract_chunk() × N (bounded fan-out, re-sorted by chunk index)
      │       ↓
      ├─ merge_chunk_results()           → candidate
      ├─ validate()                      → retry / manual review / continue
      │       ↓
      └─ split_posts() if multipleJobs   → per-post breakdown (best effort)
                       ↓
         ParseSuccess | ParseManualReview | ParseFailed  (+ one RunRecord)

State changes go through ``next_state()``; this module only performs the work
each state asks for.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from config import ParserConfig
from models.schemas.chunk import ChunkExtraction, ChunkRequest
from models.schemas.extraction_result import ExtractionResult
from models.schemas.parse_outcome import (
    ParseContext,
    ParseFailed,
    ParseManualReview,
    ParseOutcome,
    ParseSuccess,
    SuccessMeta,
)
from models.schemas.post_record import PostRecord
from models.schemas.run_record import ErrorKind, RunRecord, RunStatus
from services.audit import AuditSink, new_run_id, summarize_result
from services.chunker import chunk_text
from services.corrigendum import is_corrigendum
from services.errors import ExtractionError
from services.gemini_client import CompletionResult, CompletionService
from services.pipeline.extractor import extract_chunk
from services.pipeline.merger import merge_chunk_results
from services.pipeline.post_splitter import split_posts
from services.pipeline.state_machine import RunState, next_state
from services.pipeline.validator import validate
from services.text_normalizer import normalize

logger = logging.getLogger(__name__)

TOO_SHORT_REASON = "Text too short after cleaning"


class _MeteredCompletion(CompletionService):
    """Counts tokens across every call made during one run."""

    def __init__(self, inner: CompletionService):
        self.inner = inner
        self.tokens_used = 0

    async def complete(
        self, system_instruction: str, user_prompt: str, max_output_tokens: int
    ) -> CompletionResult:
        result = await self.inner.complete(system_instruction, user_prompt, max_output_tokens)
        self.tokens_used += result.tokens_used
        return result


class _Run:
    """Mutable bookkeeping for a single parse() call."""

    def __init__(self, context: ParseContext, completion: CompletionService):
        self.run_id = new_run_id()
        self.context = context
        self.completion = _MeteredCompletion(completion)
        self.started = time.monotonic()
        self.attempts = 0
        self.chunks_processed = 0
        self.is_corrigendum = False

    @property
    def duration_ms(self) -> int:
        return int((time.monotonic() - self.started) * 1000)


class RunController:
    """Owns the retry policy and produces exactly one terminal outcome per run.

    Runs share nothing but the completion service, so one controller can serve
    concurrent parse() calls.
    """

    def __init__(
        self,
        config: ParserConfig,
        completion: CompletionService,
        audit_sink: AuditSink,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.config = config
        self.completion = completion
        self.audit_sink = audit_sink
        self._sleep = sleep

    async def parse(self, raw_text: str, context: ParseContext | None = None) -> ParseOutcome:
        run = _Run(context or ParseContext(), self.completion)
        max_attempts = self.config.max_retry_attempts
        logger.info("Run %s started (job=%s, source=%s)", run.run_id, run.context.job_id, run.context.source_id)

        # --- cleaning ---
        text = normalize(raw_text)
        too_short = ErrorKind.INPUT_TOO_SHORT if len(text) < self.config.min_text_length else None
        if next_state(RunState.CLEANING, 0, max_attempts, too_short) is RunState.FAILED:
            logger.warning("Run %s: %d chars after cleaning, below %d", run.run_id, len(text), self.config.min_text_length)
            return await self._failed(run, TOO_SHORT_REASON, ErrorKind.INPUT_TOO_SHORT)

        run.is_corrigendum = is_corrigendum(text)
        if run.is_corrigendum:
            logger.info("Run %s: corrigendum detected", run.run_id)

        # --- chunking ---
        chunks = list(chunk_text(
            text,
            max_tokens=self.config.max_tokens_per_chunk,
            overlap_chars=self.config.overlap_chars,
            chars_per_token=self.config.chars_per_token,
        ))
        run.chunks_processed = len(chunks)
        logger.info("Run %s: %d chars in %d chunk(s)", run.run_id, len(text), len(chunks))
        state = next_state(RunState.CHUNKING, 0, max_attempts)

        attempt = 0
        while state is RunState.EXTRACTING:
            attempt += 1
            run.attempts = attempt

            # --- extracting ---
            try:
                extractions = await self._extract_all(chunks, run.completion)
            except ExtractionError as e:
                state = next_state(RunState.EXTRACTING, attempt, max_attempts, e.kind)
                if state is RunState.FAILED:
                    return await self._failed(
                        run, f"Extraction failed after {attempt} attempt(s): {e}", e.kind
                    )
                delay = self.config.retry_backoff_seconds * attempt
                logger.warning(
                    "Run %s attempt %d/%d failed (%s): %s; retrying in %.1fs",
                    run.run_id, attempt, max_attempts, e.kind.value, e, delay,
                )
                await self._sleep(delay)
                continue

            # --- merging ---
            state = next_state(RunState.EXTRACTING, attempt, max_attempts)
            candidate = merge_chunk_results([x.data for x in extractions])
            state = next_state(state, attempt, max_attempts)

            # --- validating ---
            report = validate(candidate)
            multiple_jobs = candidate.get("multipleJobs") is True
            state = next_state(state, attempt, max_attempts, report.error_kind, multiple_jobs)

            if state is RunState.EXTRACTING:
                logger.warning(
                    "Run %s attempt %d/%d invalid (%d error(s)): %s",
                    run.run_id, attempt, max_attempts, len(report.errors), report.errors[0],
                )
            elif state is RunState.MANUAL_REVIEW:
                return await self._manual_review(run, candidate, report.errors, report.error_kind)

        # --- splitting_posts ---
        posts: list[PostRecord] | None = None
        if state is RunState.SPLITTING_POSTS:
            posts = await split_posts(
                text,
                run.completion,
                prefix_chars=self.config.multi_post_prefix_chars,
                max_output_tokens=self.config.multi_post_max_output_tokens,
                timeout_seconds=self.config.completion_timeout_seconds,
            )
            logger.info("Run %s: %s post(s) split out", run.run_id, len(posts) if posts else "no")
            state = next_state(state, attempt, max_attempts)

        return await self._success(run, candidate, posts)

    async def _extract_all(
        self, chunks: list[str], completion: CompletionService
    ) -> list[ChunkExtraction]:
        """Extract every chunk; the first failure cancels the rest of the attempt."""
        semaphore = asyncio.Semaphore(self.config.max_parallel_chunks)
        total = len(chunks)

        async def run_one(index: int, text: str) -> ChunkExtraction:
            async with semaphore:
                try:
                    return await extract_chunk(
                        ChunkRequest(text=text, chunk_index=index, total_chunks=total),
                        completion,
                        max_output_tokens=self.config.max_output_tokens,
                        timeout_seconds=self.config.completion_timeout_seconds,
                    )
                except ExtractionError:
                    raise
                except Exception as e:
                    logger.exception("Unexpected error extracting chunk %d", index + 1)
                    raise ExtractionError(
                        ErrorKind.TRANSIENT, f"unexpected error: {e}", chunk_index=index
                    ) from e

        tasks = [asyncio.create_task(run_one(i, chunk)) for i, chunk in enumerate(chunks)]
        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        if pending:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        failures = [t.exception() for t in done if t.exception() is not None]
        if failures:
            raise min(failures, key=lambda exc: exc.chunk_index)

        return sorted((t.result() for t in tasks), key=lambda r: r.chunk_index)

    # --- terminal states ---

    async def _success(
        self, run: _Run, candidate: dict, posts: list[PostRecord] | None
    ) -> ParseSuccess:
        record = self._record(run, RunStatus.SUCCESS, summary_of=candidate)
        meta = SuccessMeta(
            parsing_run_id=run.run_id,
            job_id=run.context.job_id,
            source_id=run.context.source_id,
            is_corrigendum=run.is_corrigendum,
            multiple_jobs_data=posts,
            chunks_processed=run.chunks_processed,
            tokens_used=record.tokens_used,
            processing_time_ms=record.duration_ms,
            model_version=self.config.model,
            parsed_at=record.parsed_at,
        )
        await self._write_audit(record)
        logger.info(
            "Run %s succeeded in %d attempt(s), %dms, %d tokens",
            run.run_id, run.attempts, record.duration_ms, record.tokens_used,
        )
        return ParseSuccess(result=ExtractionResult.model_validate(candidate), meta=meta, audit=record)

    async def _manual_review(
        self, run: _Run, candidate: dict, errors: list[str], kind: ErrorKind | None
    ) -> ParseManualReview:
        record = self._record(
            run,
            RunStatus.MANUAL_REVIEW,
            error_kind=kind,
            error_message="; ".join(errors),
            summary_of=candidate,
        )
        await self._write_audit(record)
        logger.error(
            "Run %s needs manual review after %d attempt(s): %d validation error(s)",
            run.run_id, run.attempts, len(errors),
        )
        return ParseManualReview(partial_result=candidate, errors=errors, audit=record)

    async def _failed(self, run: _Run, reason: str, kind: ErrorKind) -> ParseFailed:
        record = self._record(run, RunStatus.FAILED, error_kind=kind, error_message=reason)
        await self._write_audit(record)
        logger.error("Run %s failed: %s", run.run_id, reason)
        return ParseFailed(reason=reason, audit=record)

    def _record(
        self,
        run: _Run,
        status: RunStatus,
        error_kind: ErrorKind | None = None,
        error_message: str | None = None,
        summary_of: dict | None = None,
    ) -> RunRecord:
        return RunRecord(
            run_id=run.run_id,
            job_id=run.context.job_id,
            source_id=run.context.source_id,
            status=status,
            error_kind=error_kind,
            error_message=error_message,
            duration_ms=run.duration_ms,
            tokens_used=run.completion.tokens_used,
            attempts=run.attempts,
            chunks_processed=run.chunks_processed,
            model=self.config.model,
            is_corrigendum=run.is_corrigendum,
            summarized_result=summarize_result(summary_of),
        )

    async def _write_audit(self, record: RunRecord) -> None:
        try:
            await self.audit_sink.write(record)
        except Exception:
            # The outcome stands even when the audit trail is unavailable
            logger.exception("Audit write failed for run %s", record.run_id)
