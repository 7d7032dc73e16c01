"""Unit tests for outcome construction and aggregation."""

from __future__ import annotations

import msgspec
import pytest

from pubstatus.results import (
    FAILURE_CODE,
    SUCCESS_CODE,
    Outcome,
    error_outcome,
    reduce_outcomes,
    success_outcome,
)


class TestOutcome:
    """Tests for the Outcome struct."""

    def test_success_outcome(self) -> None:
        """Success outcomes carry code 0 and a message."""
        outcome = success_outcome("posted")

        assert outcome.code == SUCCESS_CODE
        assert outcome.message == "posted"
        assert outcome.error is None
        assert outcome.ok

    def test_error_outcome(self) -> None:
        """Failure outcomes carry code 1 and an error."""
        outcome = error_outcome("boom")

        assert outcome.code == FAILURE_CODE
        assert outcome.error == "boom"
        assert outcome.message is None
        assert not outcome.ok

    def test_any_non_zero_code_is_failure(self) -> None:
        """Codes other than 0 are failures."""
        assert not Outcome(code=2, error="odd").ok

    def test_json_omits_absent_fields(self) -> None:
        """Encoded outcomes contain only the populated fields."""
        assert msgspec.json.encode(success_outcome("ok")) == b'{"code":0,"message":"ok"}'
        assert msgspec.json.encode(error_outcome("no")) == b'{"code":1,"error":"no"}'

    def test_outcomes_are_immutable(self) -> None:
        """Outcomes cannot be modified once built."""
        outcome = success_outcome("ok")

        with pytest.raises(AttributeError):
            outcome.code = FAILURE_CODE  # type: ignore[misc]


class TestReduceOutcomes:
    """Tests for folding many outcomes into one."""

    def test_single_success_returned_unchanged(self) -> None:
        """A lone success is passed through as-is."""
        outcome = success_outcome("posted status to GitHub")

        assert reduce_outcomes([outcome]) is outcome

    def test_single_failure_is_prefixed(self) -> None:
        """A lone failure is reported with the aggregate label."""
        result = reduce_outcomes([error_outcome("boom")])

        assert result == error_outcome("processing of some events failed: boom")

    @pytest.mark.parametrize("count", [0, 2, 3])
    def test_zero_or_many_successes_yield_generic_success(self, count: int) -> None:
        """Any number of successes other than one yields a generic success."""
        outcomes = [success_outcome(f"ok {i}") for i in range(count)]

        result = reduce_outcomes(outcomes)

        assert result == success_outcome("all results passed")

    def test_failures_are_joined_in_order(self) -> None:
        """Every failure reason appears, joined by semicolons."""
        outcomes = [
            error_outcome("first"),
            success_outcome("fine"),
            error_outcome("second"),
        ]

        result = reduce_outcomes(outcomes)

        assert result.code == FAILURE_CODE
        assert result.error == "processing of some events failed: first; second"

    def test_accepts_any_iterable(self) -> None:
        """Generators are consumed once and folded."""
        result = reduce_outcomes(success_outcome(m) for m in ("only",))

        assert result.message == "only"

    def test_nested_reduction_keeps_every_reason(self) -> None:
        """Folding folded failures keeps the inner reasons visible."""
        inner = reduce_outcomes([error_outcome("a"), error_outcome("b")])

        outer = reduce_outcomes([inner, error_outcome("c")])

        assert outer.error is not None
        for reason in ("a", "b", "c"):
            assert reason in outer.error, f"missing reason {reason!r}"
