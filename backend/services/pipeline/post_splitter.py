"""Secondary pass for notifications covering several distinct posts.

Some notifications advertise multiple posts (e.g. a CGL notice listing
Assistant Audit Officer, Junior Statistical Officer and Tax Assistant). When
the merged result says ``multipleJobs``, one extra call enumerates them.

Best-effort: any failure yields None and the parent job is stored without the
per-post breakdown.
"""

import asyncio
import json
import logging

from pydantic import ValidationError

from models.schemas.post_record import PostRecord
from services import prompt_builder
from services.errors import CompletionError
from services.gemini_client import CompletionService, strip_code_fences

logger = logging.getLogger(__name__)

PREFIX_CHARS = 8000
MAX_OUTPUT_TOKENS = 1000


async def split_posts(
    normalized_text: str,
    completion: CompletionService,
    prefix_chars: int = PREFIX_CHARS,
    max_output_tokens: int = MAX_OUTPUT_TOKENS,
    timeout_seconds: float = 60.0,
) -> list[PostRecord] | None:
    """Enumerate the posts in the first `prefix_chars` characters of the text."""
    prompt = prompt_builder.build_multi_post_prompt(normalized_text[:prefix_chars])

    try:
        response = await asyncio.wait_for(
            completion.complete(prompt_builder.SYSTEM_PROMPT, prompt, max_output_tokens),
            timeout=timeout_seconds,
        )
    except (CompletionError, asyncio.TimeoutError) as e:
        logger.warning("Multi-post split call failed: %s", e)
        return None
    except Exception:
        logger.exception("Unexpected error in multi-post split call")
        return None

    return parse_posts(response.content)


def parse_posts(content: str) -> list[PostRecord] | None:
    """Parse the model's post array; None on any parse or shape failure."""
    try:
        data = json.loads(strip_code_fences(content))
    except json.JSONDecodeError as e:
        logger.warning("Multi-post response is not valid JSON: %s", e)
        return None

    # JSON mode may wrap the array in an object
    if isinstance(data, dict) and isinstance(data.get("posts"), list):
        data = data["posts"]
    if not isinstance(data, list):
        logger.warning("Multi-post response is not an array")
        return None

    try:
        return [PostRecord.model_validate(item) for item in data]
    except ValidationError as e:
        logger.warning("Multi-post response has invalid entries: %s", e.error_count())
        return None
