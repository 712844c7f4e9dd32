"""Token-Permissions check: are GitHub workflow tokens read-only?"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml

from .errors import INVALID_GITHUB_WORKFLOW, InternalError, ScorecardError
from .file_utils import check_files_content, file_contains_commands
from .packaging import is_packaging_workflow
from .registry import register_check
from .result import (
    MAX_RESULT_SCORE,
    MIN_RESULT_SCORE,
    CheckResult,
    create_max_score_result,
    create_result_with_score,
    create_runtime_error_result,
)

CHECK_TOKEN_PERMISSIONS = "Token-Permissions"

_PERMISSIONS_OF_INTEREST = (
    "statuses",
    "checks",
    "security-events",
    "deployments",
    "contents",
    "packages",
    "actions",
)

# Penalty for each write permission; "all" is handled separately.
_PENALTIES = {
    "statuses": 0.5,
    "checks": 0.5,
    "security-events": 1.0,
    "deployments": 1.0,
    "contents": float(MAX_RESULT_SCORE),
    "packages": float(MAX_RESULT_SCORE),
    "actions": float(MAX_RESULT_SCORE),
}


@dataclass
class PermissionData:
    """Write permissions found across workflows, top-level and per job."""

    top_level_writes: set[str] = field(default_factory=set)
    run_level_writes: set[str] = field(default_factory=set)

    def has(self, name: str) -> bool:
        return name in self.top_level_writes or name in self.run_level_writes


def _invalid_workflow() -> InternalError:
    return InternalError(INVALID_GITHUB_WORKFLOW)


def _is_permission_of_interest(name: str, ignored: set[str]) -> bool:
    lowered = name.lower()
    return any(lowered == p and p not in ignored for p in _PERMISSIONS_OF_INTEREST)


def _validate_permission(
    key: str, value: Any, path: str, dl: Any, writes: set[str], ignored: set[str]
) -> None:
    if not isinstance(value, str):
        raise _invalid_workflow()

    if value.lower() == "write":
        if _is_permission_of_interest(key, ignored):
            dl.warn("'%v' permission set to '%v' in %v", key, value, path)
            writes.add(key)
        else:
            dl.debug("'%v' permission set to '%v' in %v", key, value, path)
        return

    dl.info("'%v' permission set to '%v' in %v", key, value, path)


def _validate_permissions(
    permissions: Any, path: str, dl: Any, writes: set[str], ignored: set[str]
) -> None:
    if permissions is None:
        dl.info("permissions set to 'none' in %v", path)
    elif isinstance(permissions, str):
        if permissions.lower() != "read-all" and permissions != "":
            dl.warn("permissions set to '%v' in %v", permissions, path)
            writes.add("all")
            return
        dl.info("permission set to '%v' in %v", permissions, path)
    elif isinstance(permissions, dict):
        for key, value in permissions.items():
            if not isinstance(key, str):
                raise _invalid_workflow()
            _validate_permission(key, value, path, dl, writes, ignored)
    else:
        raise _invalid_workflow()


def _validate_top_level_permissions(
    config: dict, path: str, dl: Any, data: PermissionData
) -> None:
    if "permissions" not in config:
        dl.warn("no permission defined in %v", path)
        data.top_level_writes.add("all")
        return
    _validate_permissions(config["permissions"], path, dl, data.top_level_writes, set())


def _validate_run_level_permissions(
    config: dict, path: str, dl: Any, data: PermissionData, ignored: set[str]
) -> None:
    if "jobs" not in config:
        return
    jobs = config["jobs"]
    if not isinstance(jobs, dict):
        raise _invalid_workflow()

    for job in jobs.values():
        if not isinstance(job, dict):
            raise _invalid_workflow()
        # Most jobs need no write access, so job-level permissions may be absent.
        if "permissions" not in job:
            dl.debug("no permission defined in %v", path)
            continue
        _validate_permissions(job["permissions"], path, dl, data.run_level_writes, ignored)


def calculate_score(data: PermissionData) -> int:
    """Score the write permissions found, from the maximum down."""
    if data.has("all"):
        return MIN_RESULT_SCORE

    score = float(MAX_RESULT_SCORE)
    for name, penalty in _PENALTIES.items():
        if data.has(name):
            score -= penalty

    if score < MIN_RESULT_SCORE:
        return MIN_RESULT_SCORE
    return int(score)


def create_result_for_least_privilege_tokens(
    data: PermissionData, error: BaseException | None
) -> CheckResult:
    """Turn the collected permissions, or an error, into a check result."""
    if error is not None:
        return create_runtime_error_result(CHECK_TOKEN_PERMISSIONS, error)

    score = calculate_score(data)
    if score != MAX_RESULT_SCORE:
        return create_result_with_score(
            CHECK_TOKEN_PERMISSIONS, "non read-only tokens detected in GitHub workflows", score
        )
    return create_max_score_result(
        CHECK_TOKEN_PERMISSIONS, "tokens are read-only in GitHub workflows"
    )


def _is_sarif_upload_action(content: str, path: str, dl: Any) -> bool:
    if "github/codeql-action/upload-sarif@" in content:
        dl.debug("codeql SARIF upload workflow detected: %v", path)
        return True
    dl.debug("not a codeql upload SARIF workflow: %v", path)
    return False


def _is_codeql_analysis_workflow(content: str, path: str, dl: Any) -> bool:
    if "github/codeql-action/analyze@" in content:
        dl.debug("codeql workflow detected: %v", path)
        return True
    dl.debug("not a codeql workflow: %v", path)
    return False


def _is_sarif_upload_workflow(content: str, path: str, dl: Any) -> bool:
    # CodeQL analysis uploads its SARIF file itself; other tools use the upload action.
    return _is_codeql_analysis_workflow(content, path, dl) or _is_sarif_upload_action(
        content, path, dl
    )


def _ignored_permissions(content: str, path: str, dl: Any) -> set[str]:
    ignored: set[str] = set()
    if is_packaging_workflow(content, path, dl):
        ignored.add("packages")
    if _is_sarif_upload_workflow(content, path, dl):
        ignored.add("security-events")
    return ignored


def validate_github_action_token_permissions(
    path: str, content: bytes, dl: Any, data: PermissionData
) -> bool:
    """Record the write permissions a workflow file grants; always continue."""
    if not isinstance(data, PermissionData):
        raise TypeError("invalid type")

    if not file_contains_commands(content, "#"):
        return True

    try:
        workflow = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise InternalError(f"yaml.Unmarshal: {exc}") from exc
    if workflow is None:
        workflow = {}
    if not isinstance(workflow, dict):
        raise InternalError("yaml.Unmarshal: workflow is not a mapping")

    _validate_top_level_permissions(workflow, path, dl, data)

    text = content.decode("utf-8", errors="replace")
    ignored = _ignored_permissions(text, path, dl)
    _validate_run_level_permissions(workflow, path, dl, data, ignored)
    return True


def check_workflow_permissions(path: str, content: bytes, dl: Any) -> CheckResult:
    """Run the permission analysis on a single workflow file."""
    data = PermissionData()
    try:
        validate_github_action_token_permissions(path, content, dl, data)
    except ScorecardError as exc:
        return create_result_for_least_privilege_tokens(data, exc)
    return create_result_for_least_privilege_tokens(data, None)


def token_permissions(request: Any) -> CheckResult:
    """Run the Token-Permissions check over all GitHub workflows."""
    data = PermissionData()
    try:
        check_files_content(
            ".github/workflows/*", False, request, validate_github_action_token_permissions, data
        )
    except Exception as exc:
        return create_result_for_least_privilege_tokens(data, exc)
    return create_result_for_least_privilege_tokens(data, None)


register_check(CHECK_TOKEN_PERMISSIONS, token_permissions)