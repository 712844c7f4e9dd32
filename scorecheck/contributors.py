"""Contributors check: do frequent contributors come from several organisations?"""

from __future__ import annotations

from typing import Any

from .errors import InternalError
from .registry import register_check
from .result import CheckResult, create_proportional_score_result, create_runtime_error_result

CHECK_CONTRIBUTORS = "Contributors"
_MIN_CONTRIBUTIONS_PER_USER = 5
_NUMBER_COMPANIES_FOR_TOP_SCORE = 3


def _normalize_company(company: str) -> str:
    company = company.lower()
    for noise in ("inc.", "llc", ","):
        company = company.replace(noise, "")
    return company.lstrip("@").strip(" ")


def contributors(request: Any) -> CheckResult:
    """Run the Contributors check."""
    try:
        contribs = request.repo_client.list_contributors()
    except Exception as exc:
        error = InternalError(f"Client.Repositories.ListContributors: {exc}")
        return create_runtime_error_result(CHECK_CONTRIBUTORS, error)

    companies: dict[str, None] = {}
    for contrib in contribs:
        if contrib.num_contributions < _MIN_CONTRIBUTIONS_PER_USER:
            continue
        for org in contrib.organizations:
            if org.login:
                companies[org.login] = None
        if contrib.company:
            companies[_normalize_company(contrib.company)] = None

    request.dlogger.info("contributors work for: %v", ",".join(companies))

    reason = f"{len(companies)} different companies found"
    return create_proportional_score_result(
        CHECK_CONTRIBUTORS, reason, len(companies), _NUMBER_COMPANIES_FOR_TOP_SCORE
    )


register_check(CHECK_CONTRIBUTORS, contributors)