"""Code-Review check: is code reviewed before it is merged?"""

from __future__ import annotations

from typing import Any

from .errors import InternalError
from .registry import register_check
from .result import (
    INCONCLUSIVE_RESULT_SCORE,
    MAX_RESULT_SCORE,
    CheckResult,
    create_inconclusive_result,
    create_max_score_result,
    create_proportional_score,
    create_result_with_score,
    create_runtime_error_result,
    normalize_reason,
)

CHECK_CODE_REVIEW = "Code-Review"

_BOT_MARKERS = ("bot", "gardener")
_PROW_LABELS = ("lgtm", "approved")


def select_best_score_and_reason(
    s1: int, s2: int, r1: str, r2: str, dl: Any
) -> tuple[int, str]:
    """Keep the higher score (the second on ties), logging the other reason."""
    if s1 > s2:
        dl.info(r2)
        return s1, r1
    dl.info(r1)
    return s2, r2


def create_return(review_name: str, reviewed: int, total: int) -> tuple[int, str]:
    """Score and reason for ``reviewed`` out of ``total`` commits."""
    if total > 0:
        reason = (
            f"{review_name} code reviews found for {reviewed} commits "
            f"out of the last {total}"
        )
        return create_proportional_score(reviewed, total), reason
    return INCONCLUSIVE_RESULT_SCORE, f"no {review_name} commits found"


def _is_pr_review_required(request: Any) -> tuple[int, str]:
    undetermined = INCONCLUSIVE_RESULT_SCORE, "cannot determine if branch protection is enabled"
    try:
        branch = request.repo_client.get_default_branch()
    except Exception:
        return undetermined
    rule = getattr(branch, "branch_protection_rule", None)
    count = getattr(rule, "required_approving_review_count", 0) or 0
    if count >= 1:
        return MAX_RESULT_SCORE, "branch protection for default branch is enabled"
    return undetermined


def _list_merged_prs(request: Any) -> list:
    try:
        return list(request.repo_client.list_merged_prs())
    except Exception as exc:
        raise InternalError(f"RepoClient.ListMergedPRs: {exc}") from exc


def _github_code_review(request: Any) -> tuple[int, str]:
    dl = request.dlogger
    total_merged = 0
    total_reviewed = 0
    for pr in _list_merged_prs(request):
        if not pr.merged_at:
            continue
        total_merged += 1

        if any(review.state == "APPROVED" for review in pr.reviews or []):
            dl.debug("found review approved pr: %d", pr.number)
            total_reviewed += 1
            continue

        # A merge by someone other than the author counts as a review.
        merge_commit = getattr(pr, "merge_commit", None)
        if not getattr(merge_commit, "authored_by_committer", False):
            dl.debug("found pr with committer different than author: %d", pr.number)
            total_reviewed += 1

    return create_return("GitHub", total_reviewed, total_merged)


def _prow_code_review(request: Any) -> tuple[int, str]:
    try:
        prs = _list_merged_prs(request)
    except InternalError:
        prs = []
    total_merged = 0
    total_reviewed = 0
    for pr in prs:
        if not pr.merged_at:
            continue
        total_merged += 1
        if any(label.name in _PROW_LABELS for label in pr.labels or []):
            total_reviewed += 1
    return create_return("Prow", total_reviewed, total_merged)


def _commit_message_hints(request: Any) -> tuple[int, str]:
    dl = request.dlogger
    try:
        commits = request.repo_client.list_commits()
    except Exception as exc:
        raise InternalError(f"Client.Repositories.ListCommits: {exc}") from exc

    total = 0
    total_reviewed = 0
    for commit in commits:
        committer = commit.committer.login
        if any(marker in committer for marker in _BOT_MARKERS):
            dl.debug("skip commit from bot account: %s", committer)
            continue
        total += 1

        # Gerrit leaves Reviewed-on and Reviewed-by trailers.
        message = commit.message
        if "\nReviewed-on: " in message and "\nReviewed-by: " in message:
            dl.debug("Gerrit review found for commit '%s'", commit.sha)
            total_reviewed += 1

    return create_return("Gerrit", total_reviewed, total)


def does_code_review(request: Any) -> CheckResult:
    """Run the Code-Review check."""
    dl = request.dlogger
    score, reason = _is_pr_review_required(request)
    if score == MAX_RESULT_SCORE:
        return create_max_score_result(CHECK_CODE_REVIEW, reason)

    try:
        gh_score, gh_reason = _github_code_review(request)
        hint_score, hint_reason = _commit_message_hints(request)
    except InternalError as exc:
        return create_runtime_error_result(CHECK_CODE_REVIEW, exc)

    score, reason = select_best_score_and_reason(hint_score, gh_score, hint_reason, gh_reason, dl)

    prow_score, prow_reason = _prow_code_review(request)
    score, reason = select_best_score_and_reason(prow_score, score, prow_reason, reason, dl)
    if score == INCONCLUSIVE_RESULT_SCORE:
        return create_inconclusive_result(CHECK_CODE_REVIEW, "no reviews detected")

    return create_result_with_score(CHECK_CODE_REVIEW, normalize_reason(reason, score), score)


register_check(CHECK_CODE_REVIEW, does_code_review)