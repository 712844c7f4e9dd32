"""Active check: has the repository seen commits recently?"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from .registry import register_check
from .result import (
    CheckResult,
    create_min_score_result,
    create_proportional_score_result,
    create_runtime_error_result,
)

CHECK_ACTIVE = "Active"
LOOK_BACK_DAYS = 90
_COMMITS_PER_WEEK = 1
_DAYS_IN_ONE_WEEK = 7


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def is_active(request: Any) -> CheckResult:
    """Run the Active check."""
    client = request.repo_client
    try:
        archived = client.is_archived()
    except Exception as exc:
        return create_runtime_error_result(CHECK_ACTIVE, exc)
    if archived:
        return create_min_score_result(CHECK_ACTIVE, "repo is marked as archived")

    try:
        commits = client.list_commits()
    except Exception as exc:
        return create_runtime_error_result(CHECK_ACTIVE, exc)

    threshold = datetime.now(timezone.utc) - timedelta(days=LOOK_BACK_DAYS)
    total = sum(1 for commit in commits if _as_utc(commit.committed_date) > threshold)
    return create_proportional_score_result(
        CHECK_ACTIVE,
        f"{total} commit(s) found in the last {LOOK_BACK_DAYS} days",
        total,
        _COMMITS_PER_WEEK * LOOK_BACK_DAYS // _DAYS_IN_ONE_WEEK,
    )


register_check(CHECK_ACTIVE, is_active)