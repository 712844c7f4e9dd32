"""CII-Best-Practices check: does the project hold a best-practices badge?"""

from __future__ import annotations

import json
from typing import Any

from .errors import InternalError
from .registry import register_check
from .result import (
    CheckResult,
    create_max_score_result,
    create_min_score_result,
    create_result_with_score,
    create_runtime_error_result,
)

CHECK_CII_BEST_PRACTICES = "CII-Best-Practices"

_PROJECTS_ENDPOINT = "https://bestpractices.coreinfrastructure.org/projects.json"
_SILVER_SCORE = 7
_PASSING_SCORE = 5
_IN_PROGRESS_SCORE = 2


def _fetch_badge_levels(request: Any) -> list[str]:
    repo_url = f"https://github.com/{request.owner}/{request.repo}"
    url = f"{_PROJECTS_ENDPOINT}?url={repo_url}"
    try:
        response = request.http_client.get(url)
    except Exception as exc:
        raise InternalError(f"HTTPClient.Do: {exc}") from exc
    try:
        body = response.content
    except Exception as exc:
        raise InternalError(f"ioutil.ReadAll: {exc}") from exc

    try:
        parsed = json.loads(body)
    except (ValueError, TypeError) as exc:
        raise InternalError(f"json.Unmarshal: {exc}") from exc
    if not isinstance(parsed, list) or not all(isinstance(p, dict) for p in parsed):
        raise InternalError("json.Unmarshal: unexpected response shape")

    levels = [entry.get("badge_level") or "" for entry in parsed]
    if not all(isinstance(level, str) for level in levels):
        raise InternalError("json.Unmarshal: badge_level is not a string")
    return levels


def cii_best_practices(request: Any) -> CheckResult:
    """Run the CII-Best-Practices check."""
    try:
        levels = _fetch_badge_levels(request)
    except InternalError as exc:
        return create_runtime_error_result(CHECK_CII_BEST_PRACTICES, exc)

    if not levels:
        return create_min_score_result(CHECK_CII_BEST_PRACTICES, "no badge found")

    level = levels[0]
    if not level:
        return create_min_score_result(CHECK_CII_BEST_PRACTICES, "no badge detected")
    if "in_progress" in level:
        return create_result_with_score(
            CHECK_CII_BEST_PRACTICES, "badge detected: in_progress", _IN_PROGRESS_SCORE
        )
    if "silver" in level:
        return create_result_with_score(
            CHECK_CII_BEST_PRACTICES, "badge detected: silver", _SILVER_SCORE
        )
    if "gold" in level:
        return create_max_score_result(CHECK_CII_BEST_PRACTICES, "badge detected: gold")
    if "passing" in level:
        return create_result_with_score(
            CHECK_CII_BEST_PRACTICES, "badge detected: passing", _PASSING_SCORE
        )
    error = InternalError(f"unsupported badge: {level}")
    return create_runtime_error_result(CHECK_CII_BEST_PRACTICES, error)


register_check(CHECK_CII_BEST_PRACTICES, cii_best_practices)