"""Dependency-Update-Tool check: is an automatic dependency updater configured?"""

from __future__ import annotations

from typing import Any

from .file_utils import check_if_file_exists
from .registry import register_check
from .result import (
    CheckResult,
    create_max_score_result,
    create_min_score_result,
    create_runtime_error_result,
)

CHECK_DEPENDENCY_UPDATE_TOOL = "Dependency-Update-Tool"

_DEPENDABOT_FILES = frozenset({".github/dependabot.yml"})
_RENOVATE_FILES = frozenset(
    {
        ".github/renovate.json",
        ".github/renovate.json5",
        ".renovaterc.json",
        "renovate.json",
        "renovate.json5",
        ".renovaterc",
    }
)


def update_tool_file_found(name: str, dl: Any, data: Any) -> bool:
    """Set ``data.found`` for an updater's config file; return whether to continue."""
    lowered = name.lower()
    if lowered in _DEPENDABOT_FILES:
        dl.info("dependabot detected : %s", name)
    elif lowered in _RENOVATE_FILES:
        dl.info("renovate detected: %s", name)
    else:
        return True
    data.found = True
    return False


class _Flag:
    def __init__(self) -> None:
        self.found = False


def automatic_dependency_update(request: Any) -> CheckResult:
    """Run the Dependency-Update-Tool check."""
    flag = _Flag()
    try:
        check_if_file_exists(CHECK_DEPENDENCY_UPDATE_TOOL, request, update_tool_file_found, flag)
    except Exception as exc:
        return create_runtime_error_result(CHECK_DEPENDENCY_UPDATE_TOOL, exc)
    if not flag.found:
        request.dlogger.warn("dependabot not detected")
        request.dlogger.warn("renovatebot not detected")
        return create_min_score_result(CHECK_DEPENDENCY_UPDATE_TOOL, "no update tool detected")
    return create_max_score_result(CHECK_DEPENDENCY_UPDATE_TOOL, "update tool detected")


register_check(CHECK_DEPENDENCY_UPDATE_TOOL, automatic_dependency_update)