"""Branch-Protection check: are the development and release branches protected?"""

from __future__ import annotations

import abc
import re
from dataclasses import dataclass, field
from typing import Any

from .errors import BRANCH_NOT_FOUND, COMMITISH_NIL, BranchNotFoundError, InternalError
from .registry import register_check
from .result import (
    MAX_RESULT_SCORE,
    MIN_RESULT_SCORE,
    CheckResult,
    aggregate_scores,
    create_max_score_result,
    create_min_score_result,
    create_proportional_score,
    create_result_with_score,
    create_runtime_error_result,
)

CHECK_BRANCH_PROTECTION = "Branch-Protection"
_MIN_REVIEWS = 2
_TOTAL_SCORE = 15
_COMMIT_SHA = re.compile(r"[a-f0-9]{40}")


@dataclass
class RequiredStatusChecks:
    """Status checks that must pass before merging."""

    strict: bool = False
    contexts: list[str] = field(default_factory=list)


@dataclass
class PullRequestReviews:
    """Review requirements for pull requests."""

    dismiss_stale_reviews: bool = False
    require_code_owner_reviews: bool = False
    required_approving_review_count: int = 0


@dataclass
class Protection:
    """Protection settings of a branch."""

    required_status_checks: RequiredStatusChecks | None = None
    required_pull_request_reviews: PullRequestReviews | None = None
    enforce_admins: bool = False
    require_linear_history: bool = False
    allow_force_pushes: bool = False
    allow_deletions: bool = False


@dataclass
class Branch:
    """A branch and whether it is protected."""

    name: str | None = None
    protected: bool = False


@dataclass
class Repository:
    """The repository metadata the check needs."""

    default_branch: str = ""


@dataclass
class Release:
    """A release and the branch or commit it targets."""

    target_commitish: str | None = None


class Repositories(abc.ABC):
    """Access to the repository data the check queries."""

    @abc.abstractmethod
    def get(self, owner: str, repo: str) -> Repository:
        """Return the repository's metadata."""

    @abc.abstractmethod
    def list_branches(self, owner: str, repo: str) -> list[Branch]:
        """Return all branches of the repository."""

    @abc.abstractmethod
    def list_releases(self, owner: str, repo: str) -> list[Release]:
        """Return the releases of the repository."""

    @abc.abstractmethod
    def get_branch_protection(self, owner: str, repo: str, branch: str) -> Protection:
        """Return the protection of a branch.

        Raises BranchNotFoundError when the settings are not visible to the caller.
        """


def branch_protection(request: Any) -> CheckResult:
    """Run the Branch-Protection check."""
    return check_release_and_dev_branch_protection(
        request.client.repositories, request.dlogger, request.owner, request.repo
    )


def check_release_and_dev_branch_protection(
    repos: Repositories, dl: Any, owner: str, repo: str
) -> CheckResult:
    """Check protection on the default branch and on all release branches."""
    try:
        return _check(repos, dl, owner, repo)
    except Exception as exc:  # any failure to query becomes a runtime-error result
        return create_runtime_error_result(CHECK_BRANCH_PROTECTION, exc)


def _check(repos: Repositories, dl: Any, owner: str, repo: str) -> CheckResult:
    branches = repos.list_branches(owner, repo)
    releases = repos.list_releases(owner, repo)

    check_branches: dict[str, None] = {}
    for release in releases:
        commitish = release.target_commitish
        if commitish is None:
            raise InternalError(COMMITISH_NIL)
        if _COMMIT_SHA.fullmatch(commitish):
            continue
        check_branches[_resolve_branch_name(branches, commitish)] = None

    check_branches[repos.get(owner, repo).default_branch] = None

    scores: list[int] = []
    protected = True
    unknown = False
    for name in check_branches:
        if not _is_protected(branches, name):
            protected = False
            dl.warn("branch protection not enabled for branch '%s'", name)
            continue
        try:
            scores.append(_get_protection_and_check(repos, dl, owner, repo, name))
        except BranchNotFoundError:
            unknown = True
            scores.append(1)
            dl.warn("no detailed settings available for branch protection '%s'", name)

    if not protected:
        return create_min_score_result(
            CHECK_BRANCH_PROTECTION,
            "branch protection not enabled on development/release branches",
        )

    score = aggregate_scores(*scores)
    if score == MIN_RESULT_SCORE:
        return create_min_score_result(
            CHECK_BRANCH_PROTECTION,
            "branch protection not enabled on development/release branches",
        )
    if score == MAX_RESULT_SCORE:
        return create_max_score_result(
            CHECK_BRANCH_PROTECTION,
            "branch protection is fully enabled on development and all release branches",
        )
    if unknown:
        return create_result_with_score(
            CHECK_BRANCH_PROTECTION,
            "branch protection is enabled on development and all release branches "
            "but settings are unknown",
            score,
        )
    return create_result_with_score(
        CHECK_BRANCH_PROTECTION,
        "branch protection is not maximal on development and all release branches",
        score,
    )


def _resolve_branch_name(branches: list[Branch], name: str) -> str:
    for branch in branches:
        if (branch.name or "") == name:
            return name
    # Handle the common master -> main redirect.
    if name == "master":
        return _resolve_branch_name(branches, "main")
    raise InternalError(BRANCH_NOT_FOUND)


def _is_protected(branches: list[Branch], name: str) -> bool:
    for branch in branches:
        if (branch.name or "") == name:
            return branch.protected
    raise InternalError(BRANCH_NOT_FOUND)


def _get_protection_and_check(
    repos: Repositories, dl: Any, owner: str, repo: str, branch: str
) -> int:
    try:
        protection = repos.get_branch_protection(owner, repo, branch)
    except BranchNotFoundError:
        raise
    except Exception as exc:
        raise InternalError(str(exc)) from exc
    return is_branch_protected(protection, branch, dl)


def is_branch_protected(protection: Protection, branch: str, dl: Any) -> int:
    """Score the protection rules of a branch."""
    score = 0

    if protection.allow_force_pushes:
        dl.warn("'force pushes' enabled on branch '%s'", branch)
    else:
        dl.info("'force pushes' disabled on branch '%s'", branch)
        score += 1

    if protection.allow_deletions:
        dl.warn("'allow deletion' enabled on branch '%s'", branch)
    else:
        dl.info("'allow deletion' disabled on branch '%s'", branch)
        score += 1

    if protection.require_linear_history:
        dl.info("linear history enabled on branch '%s'", branch)
        score += 1
    else:
        dl.warn("linear history disabled on branch '%s'", branch)

    score += _requires_status_checks(protection, branch, dl)
    score += _requires_thorough_reviews(protection, branch, dl)

    if protection.enforce_admins:
        dl.info("'admininistrator' PRs need reviews before being merged on branch '%s'", branch)
        score += 3
    else:
        dl.warn("'admininistrator' PRs are exempt from reviews on branch '%s'", branch)

    if score == _TOTAL_SCORE:
        return MAX_RESULT_SCORE
    return create_proportional_score(score, _TOTAL_SCORE)


def _requires_status_checks(protection: Protection, branch: str, dl: Any) -> int:
    checks = protection.required_status_checks
    if checks is None or not checks.strict:
        dl.warn("status checks for merging disabled on branch '%s'", branch)
        return 0

    dl.info("strict status check enabled on branch '%s'", branch)
    score = 1
    if checks.contexts:
        dl.warn("status checks for merging have specific status to check on branch '%s'", branch)
        score += 1
    else:
        dl.warn(
            "status checks for merging have no specific status to check on branch '%s'", branch
        )
    return score


def _requires_thorough_reviews(protection: Protection, branch: str, dl: Any) -> int:
    reviews = protection.required_pull_request_reviews
    if reviews is None:
        dl.warn("pull request reviews disabled on branch '%s'", branch)
        return 0

    score = 0
    count = reviews.required_approving_review_count
    if count >= _MIN_REVIEWS:
        dl.info("number of required reviewers is %d on branch '%s'", count, branch)
        score += 2
    else:
        score += count
        dl.warn("number of required reviewers is only %d on branch '%s'", count, branch)

    if reviews.dismiss_stale_reviews:
        dl.info("Stale review dismissal enabled on branch '%s'", branch)
        score += 3
    else:
        dl.warn("Stale review dismissal disabled on branch '%s'", branch)

    if reviews.require_code_owner_reviews:
        score += 2
        dl.info("Owner review required on branch '%s'", branch)
    else:
        dl.warn("Owner review not required on branch '%s'", branch)

    return score


register_check(CHECK_BRANCH_PROTECTION, branch_protection)