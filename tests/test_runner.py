from scorecheck.errors import InternalError, RepoUnreachableError
from scorecheck.result import (
    CheckResult,
    DetailType,
    FileType,
    LogMessage,
    create_max_score_result,
    create_runtime_error_result,
)
from scorecheck.runner import CheckRequest, DetailCollector, Runner


def test_collector_formats_messages():
    dl = DetailCollector()
    dl.info("%d commit(s) found in the last %d days", 4, 90)
    dl.warn("branch protection not enabled for branch '%s'", "main")
    dl.debug("value %v", "x")
    texts = [d.msg.text for d in dl.messages]
    assert texts == [
        "4 commit(s) found in the last 90 days",
        "branch protection not enabled for branch 'main'",
        "value x",
    ]
    assert [d.type for d in dl.messages] == [DetailType.INFO, DetailType.WARN, DetailType.DEBUG]


def test_collector_without_args_keeps_text():
    dl = DetailCollector()
    dl.info("100% done")
    assert dl.messages[0].msg.text == "100% done"


def test_collector_v3_sets_version_without_mutating():
    dl = DetailCollector()
    msg = LogMessage(text="binary detected", path="a.exe", type=FileType.BINARY)
    dl.warn3(msg)
    dl.info3(msg)
    dl.debug3(msg)
    assert msg.version == 0
    assert all(d.msg.version == 3 for d in dl.messages)
    assert dl.messages[0].msg.path == "a.exe"
    assert [d.type for d in dl.messages] == [DetailType.WARN, DetailType.INFO, DetailType.DEBUG]


def test_runner_collects_details():
    def check(req):
        req.dlogger.info("hello %s", req.owner)
        return create_max_score_result("C", "ok")

    runner = Runner("C", "o/r", CheckRequest(owner="o", repo="r"))
    res = runner.run(check)
    assert res.details == ["hello o"]
    assert res.details2[0].type == DetailType.INFO
    assert runner.last_error_name == ""


def test_runner_retries_unreachable_three_times():
    calls = []

    def check(req):
        calls.append(req)
        return create_runtime_error_result("C", RepoUnreachableError("gone"))

    res = Runner("C", "o/r", CheckRequest()).run(check)
    assert len(calls) == 3
    assert res.details == ["gone"]
    assert res.details2[0].type == DetailType.WARN


def test_runner_stops_after_success_and_resets_details():
    calls = []

    def check(req):
        calls.append(req)
        if len(calls) == 1:
            req.dlogger.info("first attempt")
            return create_runtime_error_result("C", RepoUnreachableError("gone"))
        return create_max_score_result("C", "ok")

    res = Runner("C", "o/r", CheckRequest()).run(check)
    assert len(calls) == 2
    assert res.details == []
    assert calls[0].dlogger is not calls[1].dlogger


def test_runner_does_not_retry_other_errors():
    calls = []

    def check(req):
        calls.append(req)
        return create_runtime_error_result("C", InternalError("bad"))

    runner = Runner("C", "o/r", CheckRequest())
    res = runner.run(check)
    assert len(calls) == 1
    assert res.reason == "bad"
    assert runner.last_error_name == InternalError.name


def test_runner_does_not_change_original_request():
    original = CheckRequest(owner="o")

    def check(req):
        return CheckResult(name="C")

    Runner("C", "o/r", original).run(check)
    assert original.dlogger is None