"""Packaging check: does the project publish packages from its workflows?"""

from __future__ import annotations

import posixpath
import re
from typing import Any

from .errors import InternalError
from .registry import register_check
from .result import (
    CheckResult,
    create_inconclusive_result,
    create_max_score_result,
    create_runtime_error_result,
)

CHECK_PACKAGING = "Packaging"

_NPM_REGISTRY = re.compile(r"registry-url.*https://registry\.npmjs\.org", re.DOTALL)
_NPM_PUBLISH = re.compile(r"npm.*publish", re.DOTALL)
_MAVEN_DEPLOY = re.compile(r"mvn.*deploy", re.DOTALL)
_GRADLE_PUBLISH = re.compile(r"gradle.*publish", re.DOTALL)
_GEM_PUSH = re.compile(r"gem.*push", re.DOTALL)
_NUGET_PUSH = re.compile(r"nuget.*push", re.DOTALL)
_DOCKER_PUSH = re.compile(r"docker.*push", re.DOTALL)
_CARGO_PUBLISH = re.compile(r"cargo.*publish", re.DOTALL)


def is_github_workflow_file(filename: str) -> bool:
    """True for files under the GitHub workflows directory."""
    return filename.lower().startswith(".github/workflows")


def is_packaging_workflow(content: str, path: str, dl: Any) -> bool:
    """True if the workflow text looks like it publishes a package."""
    if "actions/setup-node@" in content:
        if _NPM_REGISTRY.search(content) and _NPM_PUBLISH.search(content):
            dl.info("candidate node publishing workflow using npm: %s", path)
            return True

    if "actions/setup-java@" in content:
        if _MAVEN_DEPLOY.search(content):
            dl.info("candidate java publishing workflow using maven: %s", path)
            return True
        if _GRADLE_PUBLISH.search(content):
            dl.info("candidate java publishing workflow using gradle: %s", path)
            return True

    if _GEM_PUSH.search(content):
        dl.info("ruby publishing workflow using gem: %s", path)
        return True

    if _NUGET_PUSH.search(content):
        dl.info("nuget publishing workflow: %s", path)
        return True

    if "docker/build-push-action@" in content or _DOCKER_PUSH.search(content):
        dl.info("candidate docker publishing workflow: %s", path)
        return True

    if "actions/setup-python@" in content and "pypa/gh-action-pypi-publish@master" in content:
        dl.info("candidate python publishing workflow using pypi: %s", path)
        return True

    if "actions/setup-go" in content and "goreleaser/goreleaser-action@" in content:
        dl.info("candidate publishing workflow using goreleaser: %s", path)
        return True

    if _CARGO_PUBLISH.search(content):
        dl.info("candidate rust publishing workflow using cargo: %s", path)
        return True

    dl.debug("not a publishing workflow: %s", path)
    return False


def _as_text(content: bytes | str) -> str:
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


def packaging(request: Any) -> CheckResult:
    """Run the Packaging check."""
    dl = request.dlogger
    try:
        files = request.repo_client.list_files(is_github_workflow_file)
    except Exception as exc:
        error = InternalError(f"RepoClient.ListFiles: {exc}")
        return create_runtime_error_result(CHECK_PACKAGING, error)

    for path in files:
        try:
            content = request.repo_client.get_file_content(path)
        except Exception as exc:
            error = InternalError(f"RepoClient.GetFileContent: {exc}")
            return create_runtime_error_result(CHECK_PACKAGING, error)

        if not is_packaging_workflow(_as_text(content), path, dl):
            continue

        try:
            runs = request.client.actions.list_workflow_runs_by_file_name(
                request.owner, request.repo, posixpath.basename(path), status="success"
            )
        except Exception as exc:
            error = InternalError(f"Client.Actions.ListWorkflowRunsByFileName: {exc}")
            return create_runtime_error_result(CHECK_PACKAGING, error)

        if runs.total_count > 0:
            first = runs.workflow_runs[0] if runs.workflow_runs else None
            url = getattr(first, "html_url", "") or ""
            dl.info("workflow %s used in run: %s", path, url)
            return create_max_score_result(CHECK_PACKAGING, "publishing workflow detected")
        dl.info("workflow %s not used in runs", path)

    dl.warn("no publishing GitHub workflow detected")
    return create_inconclusive_result(CHECK_PACKAGING, "no published package detected")


register_check(CHECK_PACKAGING, packaging)