"""Per-chunk extraction contracts."""

from typing import Any

from pydantic import BaseModel


class ChunkRequest(BaseModel):
    """One segment of normalized text plus its position in the document."""
    text: str
    chunk_index: int = 0
    total_chunks: int = 1


class ChunkExtraction(BaseModel):
    """Raw (unvalidated) JSON object the model produced for one chunk."""
    chunk_index: int
    data: dict[str, Any]
    tokens_used: int = 0
