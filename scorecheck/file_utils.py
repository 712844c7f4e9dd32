"""Helpers for checks that look at the files of a repository."""

from __future__ import annotations

import re
from typing import Any, Callable, Iterator

from .errors import FILENAME_MATCH, InternalError

FileContentCallback = Callable[[str, bytes, Any, Any], bool]
FileCallback = Callable[[str, Any, Any], bool]


def _bad_pattern() -> InternalError:
    return InternalError(f"{FILENAME_MATCH}: syntax error in pattern")


def _class_char(ch: str | None, chars: Iterator[str]) -> str:
    if ch is None or ch in "-]":
        raise _bad_pattern()
    if ch == "\\":
        ch = next(chars, None)
        if ch is None:
            raise _bad_pattern()
    return ch


def _translate_class(chars: Iterator[str]) -> str:
    negate = False
    ranges: list[tuple[str, str]] = []
    ch = next(chars, None)
    if ch == "^":
        negate = True
        ch = next(chars, None)
    while True:
        if ch is None:
            raise _bad_pattern()
        if ch == "]" and ranges:
            break
        lo = _class_char(ch, chars)
        hi = lo
        ch = next(chars, None)
        if ch == "-":
            hi = _class_char(next(chars, None), chars)
            ch = next(chars, None)
        ranges.append((lo, hi))

    parts = [
        re.escape(lo) if lo == hi else f"{re.escape(lo)}-{re.escape(hi)}"
        for lo, hi in ranges
        if lo <= hi
    ]
    if not parts:
        return "." if negate else "(?!)"
    return f"[{'^' if negate else ''}{''.join(parts)}]"


def _compile(pattern: str) -> re.Pattern[str]:
    """Compile a shell pattern where '*' and '?' never match '/'."""
    out = []
    chars = iter(pattern)
    for ch in chars:
        if ch == "*":
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "\\":
            escaped = next(chars, None)
            if escaped is None:
                raise _bad_pattern()
            out.append(re.escape(escaped))
        elif ch == "[":
            out.append(_translate_class(chars))
        else:
            out.append(re.escape(ch))
    return re.compile("".join(out), re.DOTALL)


def _base(path: str) -> str:
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def is_matching_path(pattern: str, fullpath: str, case_sensitive: bool) -> bool:
    """Match the pattern against the full path, then against its file name."""
    if not case_sensitive:
        pattern = pattern.lower()
        fullpath = fullpath.lower()
    compiled = _compile(pattern)
    return bool(compiled.fullmatch(fullpath) or compiled.fullmatch(_base(fullpath)))


def is_scorecard_test_file(owner: str, repo: str, fullpath: str) -> bool:
    """True for the test data of the scorecard repository itself."""
    return (
        owner == "ossf"
        and repo == "scorecard"
        and (fullpath.startswith("testdata/") or "/testdata/" in fullpath)
    )


def check_files_content(
    pattern: str,
    case_sensitive: bool,
    request: Any,
    on_file_content: FileContentCallback,
    data: Any,
) -> None:
    """Call ``on_file_content`` for each matching file until it returns False."""

    def predicate(path: str) -> bool:
        if is_scorecard_test_file(request.owner, request.repo, path):
            return False
        return is_matching_path(pattern, path, case_sensitive)

    for path in request.repo_client.list_files(predicate):
        content = request.repo_client.get_file_content(path)
        if not on_file_content(path, content, request.dlogger, data):
            break


def check_if_file_exists(
    check_name: str, request: Any, on_file: FileCallback, data: Any
) -> None:
    """Call ``on_file`` for every file until it returns False."""
    for path in request.repo_client.list_files(lambda _path: True):
        if not on_file(path, request.dlogger, data):
            break


def file_contains_commands(content: bytes, comment: str) -> bool:
    """True if some line is neither blank nor a comment."""
    if not content:
        return False
    text = content.decode("utf-8", errors="replace")
    return any(
        line.strip() and not line.strip().startswith(comment)
        for line in text.split("\n")
    )