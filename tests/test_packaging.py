from types import SimpleNamespace

import pytest

from scorecheck.errors import InternalError
from scorecheck.packaging import (
    CHECK_PACKAGING,
    is_github_workflow_file,
    is_packaging_workflow,
    packaging,
)
from scorecheck.registry import ALL_CHECKS
from scorecheck.result import (
    INCONCLUSIVE_RESULT_SCORE,
    MAX_RESULT_SCORE,
    DetailType,
)
from scorecheck.runner import CheckRequest, DetailCollector


class FakeRepoClient:
    def __init__(self, files, fail_content=False):
        self.files = files
        self.fail_content = fail_content

    def list_files(self, predicate):
        return [path for path in self.files if predicate(path)]

    def get_file_content(self, path):
        if self.fail_content:
            raise OSError("unreadable")
        return self.files[path]


class FakeActions:
    def __init__(self, total):
        self.total = total
        self.calls = []

    def list_workflow_runs_by_file_name(self, owner, repo, filename, status):
        self.calls.append((owner, repo, filename, status))
        runs = [SimpleNamespace(html_url="https://example.com/run/1")] if self.total else []
        return SimpleNamespace(total_count=self.total, workflow_runs=runs)


def _request(files, total=1, fail_content=False):
    actions = FakeActions(total)
    request = CheckRequest(
        owner="owner",
        repo="repo",
        repo_client=FakeRepoClient(files, fail_content),
        client=SimpleNamespace(actions=actions),
        dlogger=DetailCollector(),
    )
    return request, actions


PUBLISHING = b"steps:\n  - uses: actions/setup-java@v2\n  - run: mvn deploy\n"


@pytest.mark.parametrize(
    "name, expected",
    [
        (".github/workflows/ci.yml", True),
        (".GitHub/Workflows/ci.yml", True),
        ("src/.github/workflows/ci.yml", False),
        ("README.md", False),
    ],
)
def test_is_github_workflow_file(name, expected):
    assert is_github_workflow_file(name) is expected


@pytest.mark.parametrize(
    "content",
    [
        "actions/setup-node@v2\nregistry-url: https://registry.npmjs.org\nnpm publish",
        "actions/setup-java@v2\nmvn deploy",
        "actions/setup-java@v2\ngradle publish",
        "run: gem push",
        "run: nuget push",
        "uses: docker/build-push-action@v2",
        "run: docker push image",
        "actions/setup-python@v2\npypa/gh-action-pypi-publish@master",
        "actions/setup-go@v2\ngoreleaser/goreleaser-action@v2",
        "run: cargo publish",
    ],
)
def test_publishing_workflows_detected(content):
    dl = DetailCollector()
    assert is_packaging_workflow(content, "wf.yml", dl) is True
    assert dl.messages[-1].type == DetailType.INFO
    assert "wf.yml" in dl.messages[-1].msg.text


@pytest.mark.parametrize(
    "content",
    [
        "run: echo hello",
        "run: npm publish",
        "run: mvn deploy",
        "actions/setup-python@v2\nrun: echo hello",
        "run: publish cargo",
    ],
)
def test_non_publishing_workflows(content):
    dl = DetailCollector()
    assert is_packaging_workflow(content, "wf.yml", dl) is False
    assert [d.type for d in dl.messages] == [DetailType.DEBUG]


def test_packaging_detects_used_workflow():
    request, actions = _request({".github/workflows/publish.yml": PUBLISHING, "README": b""})
    result = packaging(request)
    assert result.score == MAX_RESULT_SCORE
    assert result.reason == "publishing workflow detected"
    assert actions.calls == [("owner", "repo", "publish.yml", "success")]


def test_packaging_workflow_never_run_is_inconclusive():
    request, actions = _request({".github/workflows/publish.yml": PUBLISHING}, total=0)
    result = packaging(request)
    assert result.score == INCONCLUSIVE_RESULT_SCORE
    assert result.reason == "no published package detected"
    assert len(actions.calls) == 1
    assert request.dlogger.messages[-1].type == DetailType.WARN


def test_packaging_ignores_files_outside_workflows():
    request, actions = _request({"scripts/publish.yml": PUBLISHING})
    result = packaging(request)
    assert result.score == INCONCLUSIVE_RESULT_SCORE
    assert actions.calls == []


def test_packaging_read_error_is_runtime_error():
    request, _ = _request({".github/workflows/publish.yml": PUBLISHING}, fail_content=True)
    result = packaging(request)
    assert result.score == INCONCLUSIVE_RESULT_SCORE
    assert isinstance(result.error, InternalError)
    assert result.name == CHECK_PACKAGING


def test_packaging_is_registered():
    request, _ = _request({".github/workflows/publish.yml": PUBLISHING})
    result = ALL_CHECKS[CHECK_PACKAGING](request)
    assert result.name == CHECK_PACKAGING
    assert result.score == MAX_RESULT_SCORE