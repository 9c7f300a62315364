import os

from pydantic import BaseModel
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    ai_temperature: float = 0.1  # near-deterministic extraction
    max_output_tokens: int = 8192
    completion_timeout_seconds: float = 60.0

    # Parsing engine
    max_retry_attempts: int = 2
    max_tokens_per_chunk: int = 12000
    chunk_overlap_chars: int = 500
    chars_per_token: int = 4
    min_text_length: int = 100
    retry_backoff_seconds: float = 1.0
    max_parallel_chunks: int = 3
    multi_post_prefix_chars: int = 8000
    multi_post_max_output_tokens: int = 1000

    audit_log_path: str = ""  # JSON-lines file; empty keeps records in memory

    # HTTP surface
    max_text_length: int = 500_000
    parse_rate_limit: str = "30/minute"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "protected_namespaces": ("settings_",)}


class ParserConfig(BaseModel):
    """Options handed to the run controller at construction time."""

    max_retry_attempts: int = 2
    max_tokens_per_chunk: int = 12000
    overlap_chars: int = 500
    temperature: float = 0.1
    model: str = "gemini-2.5-flash"
    chars_per_token: int = 4
    min_text_length: int = 100
    max_output_tokens: int = 8192
    completion_timeout_seconds: float = 60.0
    retry_backoff_seconds: float = 1.0
    max_parallel_chunks: int = 3
    multi_post_prefix_chars: int = 8000
    multi_post_max_output_tokens: int = 1000

    @classmethod
    def from_settings(cls, s: Settings) -> "ParserConfig":
        return cls(
            max_retry_attempts=s.max_retry_attempts,
            max_tokens_per_chunk=s.max_tokens_per_chunk,
            overlap_chars=s.chunk_overlap_chars,
            temperature=s.ai_temperature,
            model=s.gemini_model,
            chars_per_token=s.chars_per_token,
            min_text_length=s.min_text_length,
            max_output_tokens=s.max_output_tokens,
            completion_timeout_seconds=s.completion_timeout_seconds,
            retry_backoff_seconds=s.retry_backoff_seconds,
            max_parallel_chunks=s.max_parallel_chunks,
            multi_post_prefix_chars=s.multi_post_prefix_chars,
            multi_post_max_output_tokens=s.multi_post_max_output_tokens,
        )


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
