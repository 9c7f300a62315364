"""Tests for run state transitions."""

import pytest

from models.schemas.run_record import ErrorKind
from services.pipeline.state_machine import TERMINAL_STATES, RunState, next_state


class TestNextState:
    def test_happy_path(self):
        assert next_state(RunState.CLEANING, 0, 2) is RunState.CHUNKING
        assert next_state(RunState.CHUNKING, 0, 2) is RunState.EXTRACTING
        assert next_state(RunState.EXTRACTING, 1, 2) is RunState.MERGING
        assert next_state(RunState.MERGING, 1, 2) is RunState.VALIDATING
        assert next_state(RunState.VALIDATING, 1, 2) is RunState.SUCCESS

    def test_too_short_input_fails(self):
        assert next_state(RunState.CLEANING, 0, 2, ErrorKind.INPUT_TOO_SHORT) is RunState.FAILED

    def test_multi_post_detour(self):
        assert next_state(RunState.VALIDATING, 1, 2, multiple_jobs=True) is RunState.SPLITTING_POSTS
        assert next_state(RunState.SPLITTING_POSTS, 1, 2) is RunState.SUCCESS

    @pytest.mark.parametrize("kind", [ErrorKind.TRANSIENT, ErrorKind.MALFORMED])
    def test_extraction_error_retries_then_fails(self, kind):
        assert next_state(RunState.EXTRACTING, 1, 2, kind) is RunState.EXTRACTING
        assert next_state(RunState.EXTRACTING, 2, 2, kind) is RunState.FAILED

    @pytest.mark.parametrize("kind", [ErrorKind.MALFORMED, ErrorKind.BUSINESS_RULE_VIOLATION])
    def test_invalid_output_retries_then_manual_review(self, kind):
        assert next_state(RunState.VALIDATING, 1, 2, kind) is RunState.EXTRACTING
        assert next_state(RunState.VALIDATING, 2, 2, kind) is RunState.MANUAL_REVIEW

    def test_single_attempt_budget(self):
        assert next_state(RunState.VALIDATING, 1, 1, ErrorKind.MALFORMED) is RunState.MANUAL_REVIEW

    @pytest.mark.parametrize("state", sorted(TERMINAL_STATES, key=lambda s: s.value))
    def test_terminal_states_have_no_successor(self, state):
        with pytest.raises(ValueError):
            next_state(state, 1, 2)
