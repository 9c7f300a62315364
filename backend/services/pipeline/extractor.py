"""Extraction orchestrator: one completion call per chunk, syntactic JSON parsing only.

Field-level checks are left to the validator; this stage only guarantees that
what it returns is a JSON object the model finished writing.
"""

import asyncio
import json
import logging

from models.schemas.chunk import ChunkExtraction, ChunkRequest
from models.schemas.run_record import ErrorKind
from services import prompt_builder
from services.errors import CompletionError, ExtractionError
from services.gemini_client import CompletionService, strip_code_fences

logger = logging.getLogger(__name__)


async def extract_chunk(
    request: ChunkRequest,
    completion: CompletionService,
    max_output_tokens: int = 8192,
    timeout_seconds: float = 60.0,
) -> ChunkExtraction:
    """Extract one chunk. Raises ExtractionError (transient | malformed)."""
    prompt = prompt_builder.build_extraction_prompt(
        request.text, request.chunk_index, request.total_chunks
    )

    try:
        response = await asyncio.wait_for(
            completion.complete(prompt_builder.SYSTEM_PROMPT, prompt, max_output_tokens),
            timeout=timeout_seconds,
        )
    except asyncio.TimeoutError as e:
        raise ExtractionError(
            ErrorKind.TRANSIENT,
            f"completion timed out after {timeout_seconds:g}s",
            request.chunk_index,
        ) from e
    except CompletionError as e:
        raise ExtractionError(ErrorKind.TRANSIENT, str(e), request.chunk_index) from e

    if response.finish_reason == "length":
        logger.warning("Response truncated (chunk %d/%d)", request.chunk_index + 1, request.total_chunks)
        raise ExtractionError(
            ErrorKind.MALFORMED,
            "response truncated at the output token limit",
            request.chunk_index,
        )

    try:
        data = json.loads(strip_code_fences(response.content))
    except json.JSONDecodeError as e:
        raise ExtractionError(
            ErrorKind.MALFORMED,
            f"response is not valid JSON: {e}",
            request.chunk_index,
        ) from e

    if not isinstance(data, dict):
        raise ExtractionError(
            ErrorKind.MALFORMED,
            f"expected a JSON object, got {type(data).__name__}",
            request.chunk_index,
        )

    return ChunkExtraction(
        chunk_index=request.chunk_index,
        data=data,
        tokens_used=response.tokens_used,
    )
