"""Check results, their details, and the helpers that build them."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

MAX_RESULT_CONFIDENCE = 10
HALF_RESULT_CONFIDENCE = 5
MIN_RESULT_CONFIDENCE = 0

MAX_RESULT_SCORE = 10
MIN_RESULT_SCORE = 0
INCONCLUSIVE_RESULT_SCORE = -1

_MIGRATION_THRESHOLD_PASS_VALUE = 8


class DetailType(enum.IntEnum):
    """Severity of a recorded detail."""

    INFO = 0
    WARN = 1
    DEBUG = 2


class FileType(enum.IntEnum):
    """Kind of file a detail refers to."""

    NONE = 0
    SOURCE = 1
    BINARY = 2
    TEXT = 3
    URL = 4


@dataclass
class LogMessage:
    """Information recorded with a detail."""

    text: str = ""
    path: str = ""
    type: FileType = FileType.NONE
    offset: int = 0
    snippet: str = ""
    version: int = 0


@dataclass
class CheckDetail:
    """A message recorded while running a check."""

    msg: LogMessage
    type: DetailType


@dataclass
class CheckResult:
    """Outcome of running one check."""

    name: str = ""
    error: BaseException | None = None
    details: list[str] = field(default_factory=list)
    confidence: int = 0
    passed: bool = False
    version: int = 0
    error2: BaseException | None = None
    details2: list[CheckDetail] = field(default_factory=list)
    score: int = 0
    reason: str = ""


def _truncating_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def create_proportional_score(success: int, total: int) -> int:
    """Score proportional to success/total, capped at the maximum."""
    if total == 0:
        return 0
    return min(_truncating_div(MAX_RESULT_SCORE * success, total), MAX_RESULT_SCORE)


def aggregate_scores(*scores: int) -> int:
    """Average of the scores, rounded down."""
    return sum(scores) // len(scores)


def aggregate_scores_with_weight(scores: dict[int, int]) -> int:
    """Weighted average of scores given as a score -> weight mapping."""
    total = sum(score * weight for score, weight in scores.items())
    weights = sum(scores.values())
    return total // weights


def normalize_reason(reason: str, score: int) -> str:
    """Append the normalised score to a reason."""
    return f"{reason} -- score normalized to {score}"


def create_result_with_score(name: str, reason: str, score: int) -> CheckResult:
    """Result of a check that ran cleanly and earned a given score."""
    return CheckResult(
        name=name,
        confidence=MAX_RESULT_SCORE,
        passed=score >= _MIGRATION_THRESHOLD_PASS_VALUE,
        version=2,
        score=score,
        reason=reason,
    )


def create_proportional_score_result(name: str, reason: str, b: int, t: int) -> CheckResult:
    """Result whose score is proportional to b out of t."""
    score = create_proportional_score(b, t)
    return CheckResult(
        name=name,
        confidence=MAX_RESULT_CONFIDENCE,
        passed=score >= _MIGRATION_THRESHOLD_PASS_VALUE,
        version=2,
        score=score,
        reason=normalize_reason(reason, score),
    )


def create_max_score_result(name: str, reason: str) -> CheckResult:
    """Result with the maximum score."""
    return create_result_with_score(name, reason, MAX_RESULT_SCORE)


def create_min_score_result(name: str, reason: str) -> CheckResult:
    """Result with the minimum score."""
    return create_result_with_score(name, reason, MIN_RESULT_SCORE)


def create_inconclusive_result(name: str, reason: str) -> CheckResult:
    """Result of a check that ran but found too little evidence to score."""
    return CheckResult(
        name=name,
        confidence=0,
        passed=False,
        version=2,
        score=INCONCLUSIVE_RESULT_SCORE,
        reason=reason,
    )


def create_runtime_error_result(name: str, error: BaseException) -> CheckResult:
    """Result of a check that failed to run."""
    return CheckResult(
        name=name,
        error=error,
        confidence=0,
        passed=False,
        version=2,
        error2=error,
        score=INCONCLUSIVE_RESULT_SCORE,
        reason=str(error),
    )