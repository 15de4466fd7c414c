"""Shared test fixtures for pickinfo."""

from __future__ import annotations

import pytest

from pickinfo.github.queries import CommitInfo, CommitNotFoundError, PullRequestInfo
from pickinfo.picks.models import InboxIssue, Pick
from pickinfo.picks.resolver import Resolver


class FakeQueries:
    """In-memory stand-in for GitHubQueries. Records every lookup."""

    def __init__(
        self,
        pull_requests: dict[int, PullRequestInfo] | None = None,
        commits: dict[str, CommitInfo] | None = None,
        files: dict[str, set[str]] | None = None,
        issues: list[InboxIssue] | None = None,
        project_id: str = "PVT_kwDOB",
    ) -> None:
        self.pull_requests = pull_requests or {}
        self.commits = commits or {}
        self.files = files or {}
        self.issues = issues or []
        self.project_id = project_id
        self.calls: list[tuple] = []

    def resolve_project_id(self, target_release: str) -> str:
        self.calls.append(("project", target_release))
        return self.project_id

    def list_inbox_issues(self, project_id: str, target_release: str) -> list[InboxIssue]:
        self.calls.append(("inbox", project_id, target_release))
        return list(self.issues)

    def resolve_pull_request(self, number: int) -> PullRequestInfo:
        self.calls.append(("pull_request", number))
        return self.pull_requests.get(number, PullRequestInfo(commit_hash=None))

    def resolve_commit(self, commit_hash: str) -> CommitInfo:
        self.calls.append(("commit", commit_hash))
        if commit_hash not in self.commits:
            raise CommitNotFoundError(commit_hash)
        return self.commits[commit_hash]

    def list_changed_files(self, commit_hash: str) -> set[str]:
        self.calls.append(("files", commit_hash))
        return set(self.files.get(commit_hash, set()))


def make_issue(**kwargs) -> InboxIssue:
    defaults = dict(
        number=120,
        title="Fix Android crash on startup",
        body="",
        created_at="2024-09-10T12:00:00Z",
        url="https://github.com/reactwg/react-native-releases/issues/120",
    )
    defaults.update(kwargs)
    return InboxIssue(**defaults)


def make_pick(**kwargs) -> Pick:
    defaults = dict(
        commit_hash="81e8c39e9c2b4a1f0d3e5c7b9a8f6e4d2c1b0a99",
        created_at="2024-09-10T12:00:00Z",
        title="Fix Android crash on startup",
        issue_number=120,
        url="https://github.com/reactwg/react-native-releases/issues/120",
        files=frozenset(),
    )
    defaults.update(kwargs)
    return Pick(**defaults)


@pytest.fixture
def fake_queries() -> FakeQueries:
    return FakeQueries(
        pull_requests={
            46420: PullRequestInfo(commit_hash="81e8c39e9c2b4a1f0d3e5c7b9a8f6e4d2c1b0a99"),
            46500: PullRequestInfo(
                commit_hash=None, base_ref_name="0.76-stable", head_ref_name="cipolleschi/fix-ios"
            ),
            46600: PullRequestInfo(
                commit_hash="c0ffee1234567890c0ffee1234567890c0ffee12",
                base_ref_name="main",
                head_ref_name="feature/hermes",
            ),
        },
        commits={
            "81e8c39abc": CommitInfo(
                message="Fix text measurement on Android\n\nSummary: long description",
                committed_date="2024-09-12T08:30:00Z",
            ),
            "deadbeef01": CommitInfo(
                message="Bump Hermes version",
                committed_date="2024-09-11T09:00:00Z",
            ),
        },
        files={
            "81e8c39e9c2b4a1f0d3e5c7b9a8f6e4d2c1b0a99": {"Libraries/Core.js", "Libraries/Text/Text.js"},
            "c0ffee1234567890c0ffee1234567890c0ffee12": {"Libraries/Core.js", "sdks/hermes/version.txt"},
            "81e8c39abc": {"ReactAndroid/src/main/java/TextLayout.java"},
            "deadbeef01": {"sdks/.hermesversion"},
        },
    )


@pytest.fixture
def resolver(fake_queries: FakeQueries) -> Resolver:
    return Resolver(fake_queries)
