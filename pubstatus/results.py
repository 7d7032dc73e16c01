"""Uniform handler outcomes and their aggregation.

Every step of status publication reports an :class:`Outcome` rather than
raising: a version post, a whole build, and the event as a whole. Collections
of outcomes are folded with :func:`reduce_outcomes`, which is applied with the
same rules at every level.
"""

from __future__ import annotations

import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    import collections.abc as cabc

SUCCESS_CODE = 0
FAILURE_CODE = 1

_AGGREGATE_FAILURE_PREFIX = "processing of some events failed: "
_AGGREGATE_SUCCESS_MESSAGE = "all results passed"


class Outcome(msgspec.Struct, kw_only=True, frozen=True, omit_defaults=True):
    """Result of handling part or all of a build event.

    Attributes
    ----------
    code
        ``0`` for success, any other value for failure.
    message
        Human-readable description of a successful outcome.
    error
        Human-readable reason for a failed outcome.

    """

    code: int
    message: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return ``True`` when the outcome represents success."""
        return self.code == SUCCESS_CODE


def success_outcome(message: str) -> Outcome:
    """Build a successful outcome carrying ``message``."""
    return Outcome(code=SUCCESS_CODE, message=message)


def error_outcome(error: str) -> Outcome:
    """Build a failed outcome carrying ``error``."""
    return Outcome(code=FAILURE_CODE, error=error)


def reduce_outcomes(outcomes: cabc.Iterable[Outcome]) -> Outcome:
    """Collapse many outcomes into one.

    If any outcome failed, the result is a single failure whose error joins
    every failure reason with ``"; "``. Otherwise a lone outcome is returned
    unchanged, and zero or several successes yield a generic success.

    Examples
    --------
    >>> reduce_outcomes([success_outcome("done")]).message
    'done'
    >>> reduce_outcomes([error_outcome("a"), error_outcome("b")]).error
    'processing of some events failed: a; b'

    """
    results = list(outcomes)
    failures = [result for result in results if not result.ok]
    if failures:
        reasons = [failure.error for failure in failures if failure.error]
        return error_outcome(_AGGREGATE_FAILURE_PREFIX + "; ".join(reasons))
    if len(results) == 1:
        return results[0]
    return success_outcome(_AGGREGATE_SUCCESS_MESSAGE)


__all__ = [
    "FAILURE_CODE",
    "SUCCESS_CODE",
    "Outcome",
    "error_outcome",
    "reduce_outcomes",
    "success_outcome",
]
