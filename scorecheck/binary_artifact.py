"""Binary-Artifacts check: does the repository contain binary files?"""

from __future__ import annotations

from typing import Any, Callable

from .errors import InternalError
from .file_utils import check_files_content
from .registry import register_check
from .result import (
    CheckResult,
    FileType,
    LogMessage,
    create_max_score_result,
    create_min_score_result,
    create_runtime_error_result,
)

CHECK_BINARY_ARTIFACTS = "Binary-Artifacts"

BINARY_FILE_TYPES = frozenset(
    {
        "crx", "deb", "dex", "dey", "elf", "bin", "o", "so", "iso", "class",
        "jar", "bundle", "dylib", "lib", "msi", "acm", "ax", "cpl", "dll",
        "drv", "efi", "exe", "mui", "ocx", "scr", "sys", "tsp", "pyc", "pyo",
        "par", "rpm", "swf", "torrent", "cab", "whl",
    }
)


def _prefix(*magics: bytes) -> Callable[[bytes], bool]:
    return lambda buf: any(buf.startswith(magic) for magic in magics)


def _at(offset: int, magic: bytes) -> Callable[[bytes], bool]:
    return lambda buf: buf[offset : offset + len(magic)] == magic


# Checked in order: more specific signatures come before the generic ones.
_SIGNATURES: tuple[tuple[str, Callable[[bytes], bool]], ...] = (
    ("crx", _prefix(b"Cr24")),
    ("deb", _prefix(b"!<arch>\ndebian-binary")),
    ("ar", _prefix(b"!<arch>")),
    ("dex", _prefix(b"dex\n")),
    ("dey", _prefix(b"dey\n")),
    ("elf", _prefix(b"\x7fELF")),
    ("exe", _prefix(b"MZ")),
    ("class", _prefix(b"\xca\xfe\xba\xbe")),
    ("rpm", _prefix(b"\xed\xab\xee\xdb")),
    ("swf", _prefix(b"CWS", b"FWS")),
    ("cab", _prefix(b"MSCF", b"ISc(")),
    ("msi", _prefix(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1")),
    ("iso", _at(32769, b"CD001")),
    ("zip", _prefix(b"PK\x03\x04")),
    ("png", _prefix(b"\x89PNG\r\n\x1a\n")),
    ("jpg", _prefix(b"\xff\xd8\xff")),
    ("gif", _prefix(b"GIF87a", b"GIF89a")),
    ("pdf", _prefix(b"%PDF")),
    ("gz", _prefix(b"\x1f\x8b\x08")),
    ("bz2", _prefix(b"BZh")),
    ("7z", _prefix(b"7z\xbc\xaf\x27\x1c")),
    ("tar", _at(257, b"ustar")),
)


def detect_file_extension(content: bytes) -> str:
    """Identify common formats by their leading bytes; "" when unknown."""
    if not content:
        raise InternalError("filetype.Get:Empty buffer")
    for extension, matches in _SIGNATURES:
        if matches(content):
            return extension
    return ""


def _path_extension(path: str) -> str:
    name = path.rsplit("/", 1)[-1]
    index = name.rfind(".")
    return name[index:].replace(".", "") if index >= 0 else ""


def check_binary_file_content(path: str, content: bytes, dl: Any, data: Any) -> bool:
    """Flag ``data.found`` if the file is a binary; always continue iterating."""
    if (
        detect_file_extension(content) in BINARY_FILE_TYPES
        or _path_extension(path) in BINARY_FILE_TYPES
    ):
        dl.warn3(LogMessage(path=path, type=FileType.BINARY, text="binary detected"))
        data.found = True
    return True


class _Flag:
    def __init__(self) -> None:
        self.found = False


def binary_artifacts(request: Any) -> CheckResult:
    """Run the Binary-Artifacts check."""
    flag = _Flag()
    try:
        check_files_content("*", False, request, check_binary_file_content, flag)
    except Exception as exc:
        return create_runtime_error_result(CHECK_BINARY_ARTIFACTS, exc)
    if flag.found:
        return create_min_score_result(CHECK_BINARY_ARTIFACTS, "binaries present in source code")
    return create_max_score_result(CHECK_BINARY_ARTIFACTS, "no binaries found in the repo")


register_check(CHECK_BINARY_ARTIFACTS, binary_artifacts)