"""Registry of all checks by name."""

from __future__ import annotations

from typing import Callable

ALL_CHECKS: dict[str, Callable] = {}


def register_check(name: str, fn: Callable) -> Callable:
    """Register a check function under a name and return it."""
    ALL_CHECKS[name] = fn
    return fn