# scorecheck

`scorecheck` runs security health checks against a source repository. Each
check gives a score from 0 to 10. A score of -1 means the check could not
reach a conclusion. Every check also records a list of details that show
what earned or cost points.

## Checks

| Name                     | Function                                                   |
|--------------------------|------------------------------------------------------------|
| `Active`                 | `scorecheck.active.is_active`                              |
| `Binary-Artifacts`       | `scorecheck.binary_artifact.binary_artifacts`              |
| `Branch-Protection`      | `scorecheck.branch_protection.branch_protection`           |
| `CI-Tests`               | `scorecheck.ci_tests.ci_tests`                             |
| `CII-Best-Practices`     | `scorecheck.best_practices.cii_best_practices`             |
| `Code-Review`            | `scorecheck.code_review.does_code_review`                  |
| `Contributors`           | `scorecheck.contributors.contributors`                     |
| `Dependency-Update-Tool` | `scorecheck.dependency_update.automatic_dependency_update` |
| `Packaging`              | `scorecheck.packaging.packaging`                           |
| `Token-Permissions`      | `scorecheck.permissions.token_permissions`                 |

When a check module is imported, it adds its function to
`scorecheck.registry.ALL_CHECKS` by calling `register_check`.

## Running a check

A check takes a `CheckRequest` (`scorecheck.runner`) and returns a
`CheckResult` (`scorecheck.result`). You normally run a check through a
`Runner`. The runner:

- gives the check a fresh `DetailCollector`;
- runs the check up to three times in total, and runs it again only when
  the result carries a `RepoUnreachableError`;
- attaches the collected details to the result, as `details2`
  (`CheckDetail` objects) and `details` (their texts).

```python
from scorecheck.runner import CheckRequest, Runner
from scorecheck.active import is_active

request = CheckRequest(repo_client=my_client, owner="octo", repo="widgets")
runner = Runner("Active", "octo/widgets", request)
result = runner.run(is_active)

print(result.name, result.score, result.reason)
for detail in result.details2:
    print(detail.type.name, detail.msg.text)
print(runner.runtime_seconds, runner.last_error_name)
```

## What the checks expect from their clients

You supply the clients. The checks call only the following:

- `repo_client`: `list_files(predicate)`, `get_file_content(path)`,
  `is_archived()`, `list_commits()`, `list_merged_prs()`,
  `list_contributors()` and `get_default_branch()`.
- `client.repositories`: an implementation of
  `scorecheck.branch_protection.Repositories` (`get`, `list_branches`,
  `list_releases`, `get_branch_protection`) for Branch-Protection, and
  `list_statuses(owner, repo, sha)` for CI-Tests.
- `client.checks.list_check_runs_for_ref(owner, repo, sha)` for CI-Tests.
- `client.actions.list_workflow_runs_by_file_name(owner, repo, name, status=...)`
  for Packaging.
- `http_client.get(url)`, whose response has `.content`, for
  CII-Best-Practices.

If a client call fails, the check returns a result made by
`create_runtime_error_result`. Its score is -1 and its `error` is set.

## Scoring helpers

`scorecheck.result` holds the helpers that the checks use to build results:

- `create_max_score_result`
- `create_min_score_result`
- `create_result_with_score`
- `create_proportional_score_result`
- `create_inconclusive_result`
- `create_runtime_error_result`

It also holds the score arithmetic: `create_proportional_score`,
`aggregate_scores` and `aggregate_scores_with_weight`.

The error types are in `scorecheck.errors`:

- `ScorecardError`
- `InternalError`
- `RepoUnreachableError`
- `BranchNotFoundError`

## Checking a single workflow file

You can score one GitHub Actions workflow for token permissions without
any client:

```python
from pathlib import Path
from scorecheck.permissions import check_workflow_permissions
from scorecheck.runner import DetailCollector

dl = DetailCollector()
path = ".github/workflows/ci.yml"
result = check_workflow_permissions(path, Path(path).read_bytes(), dl)
print(result.score, result.reason)
```

## What it does not do

- `scorecheck` has no command-line tool.
- It has no built-in client for GitHub or any other hosting service. It
  only scores the data that your clients return.
- It has no check for fuzzing.

## Tests

```
pip install -e .[test]
pytest
```