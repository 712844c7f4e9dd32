from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from scorecheck.active import CHECK_ACTIVE, is_active
from scorecheck.registry import ALL_CHECKS
from scorecheck.result import INCONCLUSIVE_RESULT_SCORE, create_proportional_score
from scorecheck.runner import CheckRequest, DetailCollector


class FakeClient:
    def __init__(self, archived=False, commits=(), failure=None):
        self.archived = archived
        self.commits = list(commits)
        self.failure = failure

    def is_archived(self):
        if self.failure is not None:
            raise self.failure
        return self.archived

    def list_commits(self):
        return self.commits


def _commit(days_ago):
    return SimpleNamespace(
        committed_date=datetime.now(timezone.utc) - timedelta(days=days_ago)
    )


def _request(client):
    return CheckRequest(owner="o", repo="r", repo_client=client, dlogger=DetailCollector())


def test_archived_repo_gets_min_score():
    result = is_active(_request(FakeClient(archived=True, commits=[_commit(1)])))
    assert result.score == 0
    assert result.reason == "repo is marked as archived"
    assert result.name == CHECK_ACTIVE


def test_many_recent_commits_get_max_score():
    result = is_active(_request(FakeClient(commits=[_commit(1)] * 20)))
    assert result.score == 10
    assert result.passed is True


def test_old_commits_are_not_counted():
    result = is_active(_request(FakeClient(commits=[_commit(200)] * 20)))
    assert result.score == 0
    assert result.reason.startswith("0 commit(s) found in the last 90 days")


def test_partial_activity_is_proportional():
    commits = [_commit(5)] * 6 + [_commit(120)] * 4
    result = is_active(_request(FakeClient(commits=commits)))
    assert result.reason.startswith("6 commit(s) found")
    assert result.score == create_proportional_score(6, 90 // 7)
    assert result.passed is False


def test_naive_dates_are_treated_as_utc():
    naive = SimpleNamespace(committed_date=datetime.utcnow() - timedelta(days=2))
    result = is_active(_request(FakeClient(commits=[naive])))
    assert result.reason.startswith("1 commit(s) found")


def test_client_failure_becomes_runtime_error():
    failure = RuntimeError("unreachable")
    result = is_active(_request(FakeClient(failure=failure)))
    assert result.error2 is failure
    assert result.score == INCONCLUSIVE_RESULT_SCORE
    assert result.reason == "unreachable"


def test_active_is_registered():
    check = ALL_CHECKS[CHECK_ACTIVE]
    result = check(_request(FakeClient(archived=True)))
    assert result.name == CHECK_ACTIVE
    assert result.reason == "repo is marked as archived"