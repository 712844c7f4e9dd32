"""Error types raised by checks, and the messages they carry."""

from __future__ import annotations

INVALID_DOCKERFILE = "invalid Dockerfile"
INVALID_YAML_FILE = "invalid yaml file"
FILENAME_MATCH = "filename match error"
EMPTY_FILE = "empty file"
INVALID_SHELL_CODE = "invalid shell code"
COMMITISH_NIL = "commitish is nil"
BRANCH_NOT_FOUND = "branch not found"
INVALID_GITHUB_WORKFLOW = "invalid GitHub workflow"
NO_REVIEWS = "no reviews found"
NO_COMMITS = "no commits found"


class ScorecardError(Exception):
    """Base class of all errors raised while running checks."""

    name = "Scorecard"


class InternalError(ScorecardError):
    """A check failed because of an internal problem."""

    name = "ScorecardInternal"


class RepoUnreachableError(ScorecardError):
    """The repository could not be reached; the check may be retried."""

    name = "RepoUnreachable"


class BranchNotFoundError(ScorecardError):
    """A branch, or the details of its protection, could not be found."""

    name = "BranchNotFound"

    def __init__(self, message: str = BRANCH_NOT_FOUND) -> None:
        super().__init__(message)


def error_name(error: BaseException | None) -> str:
    """Return the short name used to label an error in statistics."""
    if error is None:
        return ""
    if isinstance(error, ScorecardError):
        return error.name
    return "Unknown"