"""Run states and the pure transition function driving the run controller.

    cleaning ─▶ chunking ─▶ extracting(n) ─▶ merging ─▶ validating ─▶ [splitting_posts] ─▶ success
        │                     │    ▲                        │
        ▼                     │    └──── retry (n < max) ───┤
      failed ◀── exhausted ───┘                             └── exhausted ─▶ manual_review

Extraction errors (transient, malformed) that exhaust retries end in ``failed``;
invalid output that exhausts retries ends in ``manual_review`` so a human can
correct the best-effort result.
"""

from enum import Enum

from models.schemas.run_record import ErrorKind


class RunState(str, Enum):
    CLEANING = "cleaning"
    CHUNKING = "chunking"
    EXTRACTING = "extracting"
    MERGING = "merging"
    VALIDATING = "validating"
    SPLITTING_POSTS = "splitting_posts"
    SUCCESS = "success"
    MANUAL_REVIEW = "manual_review"
    FAILED = "failed"


TERMINAL_STATES = frozenset({RunState.SUCCESS, RunState.MANUAL_REVIEW, RunState.FAILED})


def next_state(
    state: RunState,
    attempt: int,
    max_attempts: int,
    error: ErrorKind | None = None,
    multiple_jobs: bool = False,
) -> RunState:
    """Return the state that follows ``state``.

    Args:
        state: the state that just finished
        attempt: 1-based extraction attempt in progress
        max_attempts: retry budget (attempts, not re-tries)
        error: failure raised by ``state``, None on success
        multiple_jobs: merged result flags a multi-post notification
    """
    if state in TERMINAL_STATES:
        raise ValueError(f"{state.value} is terminal")

    can_retry = attempt < max_attempts

    if state is RunState.CLEANING:
        return RunState.FAILED if error is not None else RunState.CHUNKING

    if state is RunState.CHUNKING:
        return RunState.EXTRACTING

    if state is RunState.EXTRACTING:
        if error is None:
            return RunState.MERGING
        return RunState.EXTRACTING if can_retry else RunState.FAILED

    if state is RunState.MERGING:
        return RunState.VALIDATING

    if state is RunState.VALIDATING:
        if error is None:
            return RunState.SPLITTING_POSTS if multiple_jobs else RunState.SUCCESS
        return RunState.EXTRACTING if can_retry else RunState.MANUAL_REVIEW

    # SPLITTING_POSTS is best-effort: its failure never changes the outcome
    return RunState.SUCCESS
