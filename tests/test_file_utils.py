import pytest

from scorecheck.errors import InternalError
from scorecheck.file_utils import (
    check_files_content,
    check_if_file_exists,
    file_contains_commands,
    is_matching_path,
    is_scorecard_test_file,
)
from scorecheck.runner import CheckRequest, DetailCollector


class FakeRepoClient:
    def __init__(self, files):
        self.files = files
        self.read = []

    def list_files(self, predicate):
        return [p for p in self.files if predicate(p)]

    def get_file_content(self, path):
        self.read.append(path)
        return self.files[path]


def make_request(files, owner="o", repo="r"):
    return CheckRequest(
        owner=owner, repo=repo, repo_client=FakeRepoClient(files), dlogger=DetailCollector()
    )


@pytest.mark.parametrize(
    "pattern, path, case_sensitive, expected",
    [
        (".github/workflows/*", ".github/workflows/ci.yml", False, True),
        (".github/workflows/*", ".github/workflows/sub/ci.yml", False, False),
        (".github/workflows/*", ".GitHub/Workflows/ci.yml", False, True),
        (".github/workflows/*", ".GitHub/Workflows/ci.yml", True, False),
        ("*", "deep/dir/file.bin", False, True),
        ("*.yml", "a/b/c.yml", False, True),
        ("*.yml", "a/b/c.yaml", False, False),
        ("file?.txt", "dir/file1.txt", True, True),
        ("file[0-9].txt", "file7.txt", True, True),
        ("file[^0-9].txt", "file7.txt", True, False),
        ("file[!].txt", "file!.txt", True, True),
    ],
)
def test_is_matching_path(pattern, path, case_sensitive, expected):
    assert is_matching_path(pattern, path, case_sensitive) is expected


@pytest.mark.parametrize("pattern", ["[", "a[]", "[a-", "x\\"])
def test_is_matching_path_bad_pattern(pattern):
    with pytest.raises(InternalError):
        is_matching_path(pattern, "anything", False)


def test_is_scorecard_test_file():
    assert is_scorecard_test_file("ossf", "scorecard", "testdata/x.yaml") is True
    assert is_scorecard_test_file("ossf", "scorecard", "checks/testdata/x.yaml") is True
    assert is_scorecard_test_file("ossf", "scorecard", "checks/x.yaml") is False
    assert is_scorecard_test_file("other", "scorecard", "testdata/x.yaml") is False


def test_check_files_content_visits_matching_files():
    files = {".github/workflows/a.yml": b"a", "README.md": b"r", ".github/workflows/b.yml": b"b"}
    request = make_request(files)
    seen = []

    def on_content(path, content, dl, data):
        data.append((path, content))
        assert dl is request.dlogger
        return True

    check_files_content(".github/workflows/*", False, request, on_content, seen)
    assert seen == [(".github/workflows/a.yml", b"a"), (".github/workflows/b.yml", b"b")]


def test_check_files_content_stops_when_callback_returns_false():
    files = {"a.bin": b"1", "b.bin": b"2", "c.bin": b"3"}
    request = make_request(files)
    seen = []

    def on_content(path, content, dl, data):
        data.append(path)
        return False

    check_files_content("*", False, request, on_content, seen)
    assert seen == ["a.bin"]
    assert request.repo_client.read == ["a.bin"]


def test_check_files_content_skips_own_test_files():
    files = {"testdata/a.yml": b"x", "b.yml": b"y"}
    request = make_request(files, owner="ossf", repo="scorecard")
    seen = []
    check_files_content("*", False, request, lambda p, c, dl, d: d.append(p) or True, seen)
    assert seen == ["b.yml"]


def test_check_files_content_propagates_errors():
    request = make_request({"a.txt": b"x"})

    def on_content(path, content, dl, data):
        raise InternalError("bad content")

    with pytest.raises(InternalError, match="bad content"):
        check_files_content("*", False, request, on_content, None)


def test_check_if_file_exists_stops_early():
    request = make_request({"x": b"", ".github/dependabot.yml": b"", "z": b""})
    seen = []

    def on_file(path, dl, data):
        data.append(path)
        return path != ".github/dependabot.yml"

    check_if_file_exists("Check", request, on_file, seen)
    assert seen == ["x", ".github/dependabot.yml"]


@pytest.mark.parametrize(
    "content, expected",
    [
        (b"", False),
        (b"# only a comment\n   \n  # another\n", False),
        (b"# comment\nFROM scratch\n", True),
        (b"\r\n   RUN make\r\n", True),
    ],
)
def test_file_contains_commands(content, expected):
    assert file_contains_commands(content, "#") is expected