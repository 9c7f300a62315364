"""Exceptions raised inside the parsing engine."""

from models.schemas.run_record import ErrorKind


class CompletionError(Exception):
    """The completion service could not produce a response (transport, non-2xx)."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ExtractionError(Exception):
    """A single chunk's extraction attempt failed.

    Attributes:
        kind: ErrorKind.TRANSIENT (network, timeout) or ErrorKind.MALFORMED
            (non-JSON or truncated output)
        chunk_index: position of the chunk that failed
    """

    def __init__(self, kind: ErrorKind, message: str, chunk_index: int = 0):
        self.kind = kind
        self.message = message
        self.chunk_index = chunk_index
        super().__init__(f"chunk {chunk_index + 1}: {message}")
