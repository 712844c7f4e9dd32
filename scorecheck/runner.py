"""Check requests, detail collection and the retrying check runner."""

from __future__ import annotations

import dataclasses
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from .errors import RepoUnreachableError, error_name
from .result import CheckDetail, CheckResult, DetailType, LogMessage

_CHECK_RETRIES = 3

_log = logging.getLogger(__name__)


@dataclass
class CheckRequest:
    """Everything a check function needs to run.

    ``repo_client`` offers ``list_files(predicate)``, ``get_file_content(path)``
    and the repository queries the checks use; ``client``, ``graph_client`` and
    ``http_client`` are the remote API clients.
    """

    owner: str = ""
    repo: str = ""
    repo_client: Any = None
    client: Any = None
    graph_client: Any = None
    http_client: Any = None
    dlogger: Any = None


def _format(desc: str, args: tuple) -> str:
    if not args:
        return desc
    try:
        return desc.replace("%v", "%s") % args
    except (TypeError, ValueError):
        return " ".join([desc, *map(str, args)])


@dataclass
class DetailCollector:
    """Records the details a check logs."""

    messages: list[CheckDetail] = field(default_factory=list)

    def _add(self, kind: DetailType, msg: LogMessage) -> None:
        self.messages.append(CheckDetail(msg=msg, type=kind))

    def info(self, desc: str, *args: Any) -> None:
        self._add(DetailType.INFO, LogMessage(text=_format(desc, args)))

    def warn(self, desc: str, *args: Any) -> None:
        self._add(DetailType.WARN, LogMessage(text=_format(desc, args)))

    def debug(self, desc: str, *args: Any) -> None:
        self._add(DetailType.DEBUG, LogMessage(text=_format(desc, args)))

    def info3(self, msg: LogMessage) -> None:
        self._add(DetailType.INFO, dataclasses.replace(msg, version=3))

    def warn3(self, msg: LogMessage) -> None:
        self._add(DetailType.WARN, dataclasses.replace(msg, version=3))

    def debug3(self, msg: LogMessage) -> None:
        self._add(DetailType.DEBUG, dataclasses.replace(msg, version=3))


CheckFn = Callable[[CheckRequest], CheckResult]


@dataclass
class Runner:
    """Runs a check, retrying while the repository is unreachable."""

    check_name: str
    repo: str
    request: CheckRequest
    runtime_seconds: int = 0
    last_error_name: str = ""

    def run(self, check: CheckFn) -> CheckResult:
        start = int(time.time())
        collector = DetailCollector()
        result = CheckResult(name=self.check_name)
        for _ in range(_CHECK_RETRIES):
            collector = DetailCollector()
            request = dataclasses.replace(self.request, dlogger=collector)
            result = check(request)
            if isinstance(result.error2, RepoUnreachableError):
                collector.warn("%v", result.error2)
                continue
            break

        result.details2 = collector.messages
        result.details.extend(d.msg.text for d in collector.messages)

        self.runtime_seconds = int(time.time()) - start
        self.last_error_name = error_name(result.error2) if result.error is not None else ""
        _log.debug(
            "check %s on %s took %ds%s",
            self.check_name,
            self.repo,
            self.runtime_seconds,
            f" (error: {self.last_error_name})" if self.last_error_name else "",
        )
        return result