"""Read-only GitHub queries used to reconcile a release board.

Board data (Projects v2) is only reachable through GraphQL; commit details
come from the REST API through PyGithub. Every call here is an idempotent
read, so transient failures are retried.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from github.Commit import Commit
from github.GithubException import (
    GithubException,
    RateLimitExceededException,
    UnknownObjectException,
)

from pickinfo.config import Config
from pickinfo.github.client import GitHubClient
from pickinfo.picks.models import InboxIssue

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
RETRY_BASE_DELAY = 2.0  # seconds
ITEMS_PAGE_SIZE = 100

T = TypeVar("T")

PROJECTS_QUERY = """\
query($owner: String!, $title: String!) {
  organization(login: $owner) {
    projectsV2(first: 20, query: $title) {
      nodes { id title }
    }
  }
}
"""

PROJECT_ITEMS_QUERY = """\
query($projectId: ID!, $cursor: String, $statusField: String!, $releaseField: String!) {
  node(id: $projectId) {
    ... on ProjectV2 {
      items(first: %d, after: $cursor) {
        pageInfo { hasNextPage endCursor }
        nodes {
          status: fieldValueByName(name: $statusField) {
            ... on ProjectV2ItemFieldSingleSelectValue { name }
          }
          release: fieldValueByName(name: $releaseField) {
            ... on ProjectV2ItemFieldTextValue { text }
            ... on ProjectV2ItemFieldSingleSelectValue { name }
          }
          content {
            ... on Issue { number title body createdAt url }
          }
        }
      }
    }
  }
}
""" % ITEMS_PAGE_SIZE

PULL_REQUEST_QUERY = """\
query($owner: String!, $name: String!, $number: Int!) {
  repository(owner: $owner, name: $name) {
    pullRequest(number: $number) {
      baseRefName
      headRefName
      mergeCommit { oid }
      timelineItems(itemTypes: [CLOSED_EVENT], last: 1) {
        nodes {
          ... on ClosedEvent {
            closer { ... on Commit { oid } }
          }
        }
      }
    }
  }
}
"""


class ProjectNotFoundError(Exception):
    """No release board matches the target release."""


class CommitNotFoundError(Exception):
    """A referenced commit does not exist in the repository."""

    def __init__(self, commit_hash: str) -> None:
        super().__init__(f"Commit {commit_hash} not found")
        self.commit_hash = commit_hash


@dataclass(frozen=True)
class PullRequestInfo:
    commit_hash: str | None  # None until the PR has landed as a tracked commit
    base_ref_name: str | None = None
    head_ref_name: str | None = None


@dataclass(frozen=True)
class CommitInfo:
    message: str
    committed_date: str  # ISO format date


def _is_transient(exc: GithubException) -> bool:
    if isinstance(exc, RateLimitExceededException):
        return True
    return isinstance(exc.status, int) and exc.status >= 500


def _with_retries(call: Callable[[], T], description: str) -> T:
    attempt = 0
    while True:
        try:
            return call()
        except GithubException as e:
            if not _is_transient(e) or attempt >= MAX_RETRIES - 1:
                raise
            delay = RETRY_BASE_DELAY * (2 ** attempt)
            logger.warning(f"GitHub error on {description} ({e.status}), retrying in {delay}s...")
            time.sleep(delay)
            attempt += 1


def _format_date(value: Any) -> str:
    """PyGithub datetimes as GitHub's own 'YYYY-MM-DDTHH:MM:SSZ' strings."""
    if isinstance(value, str):
        return value
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


class GitHubQueries:
    """Queries a release board and the repository its picks land in."""

    def __init__(self, client: GitHubClient, config: Config) -> None:
        self._client = client
        self._config = config
        self._commits: dict[str, Commit] = {}

    def resolve_project_id(self, target_release: str) -> str:
        """Find the Projects v2 board for the release line of `target_release`."""
        title = self._config.project_title_for(target_release)
        data = _with_retries(
            lambda: self._client.graphql(
                PROJECTS_QUERY, {"owner": self._config.project_owner, "title": title}
            ),
            f"project lookup '{title}'",
        )
        organization = data.get("organization") or {}
        nodes = (organization.get("projectsV2") or {}).get("nodes") or []
        for node in nodes:
            if node and node.get("title") == title:
                logger.debug(f"Project '{title}' is {node['id']}")
                return node["id"]
        raise ProjectNotFoundError(
            f"No project titled '{title}' owned by {self._config.project_owner}"
        )

    def list_inbox_issues(self, project_id: str, target_release: str) -> list[InboxIssue]:
        """Issues in the inbox column whose target release matches."""
        issues: list[InboxIssue] = []
        cursor: str | None = None
        while True:
            variables = {
                "projectId": project_id,
                "cursor": cursor,
                "statusField": self._config.status_field,
                "releaseField": self._config.target_release_field,
            }
            data = _with_retries(
                lambda: self._client.graphql(PROJECT_ITEMS_QUERY, variables),
                f"project items of {project_id}",
            )
            items = (data.get("node") or {}).get("items") or {}
            for node in items.get("nodes") or []:
                issue = self._inbox_issue(node, target_release)
                if issue is not None:
                    issues.append(issue)

            page_info = items.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")

        logger.info(f"{len(issues)} inbox issue(s) for {target_release}")
        return issues

    def _inbox_issue(self, node: dict[str, Any] | None, target_release: str) -> InboxIssue | None:
        if not node:
            return None
        content = node.get("content") or {}
        if "number" not in content:
            return None  # draft items and pull requests on the board

        status = (node.get("status") or {}).get("name")
        if status != self._config.inbox_status:
            return None

        release_value = node.get("release") or {}
        release = release_value.get("text") or release_value.get("name") or ""
        if not re.match(rf"{re.escape(target_release)}(?!\d)", release.strip()):
            return None

        return InboxIssue(
            number=content["number"],
            title=content.get("title") or "",
            body=content.get("body") or "",
            created_at=content.get("createdAt") or "",
            url=content.get("url") or "",
        )

    def resolve_pull_request(self, number: int) -> PullRequestInfo:
        """Commit a PR landed as: its merge commit, else the commit that closed it."""
        owner, name = self._client.repo_name.split("/", 1)
        try:
            data = _with_retries(
                lambda: self._client.graphql(
                    PULL_REQUEST_QUERY, {"owner": owner, "name": name, "number": number}
                ),
                f"PR #{number}",
            )
        except UnknownObjectException:
            # Issue numbers and typos land here; treated like an unlanded PR
            logger.warning(f"PR #{number} not found in {self._client.repo_name}")
            return PullRequestInfo(commit_hash=None)
        pr = (data.get("repository") or {}).get("pullRequest") or {}

        commit_hash = (pr.get("mergeCommit") or {}).get("oid")
        if not commit_hash:
            for event in (pr.get("timelineItems") or {}).get("nodes") or []:
                closer = (event or {}).get("closer") or {}
                if closer.get("oid"):
                    commit_hash = closer["oid"]

        return PullRequestInfo(
            commit_hash=commit_hash or None,
            base_ref_name=pr.get("baseRefName"),
            head_ref_name=pr.get("headRefName"),
        )

    def _get_commit(self, commit_hash: str) -> Commit:
        if commit_hash not in self._commits:
            # Repository lookup errors are not missing commits
            repo = self._client.repo
            try:
                commit = _with_retries(
                    lambda: repo.get_commit(commit_hash),
                    f"commit {commit_hash}",
                )
            except UnknownObjectException as e:
                raise CommitNotFoundError(commit_hash) from e
            except GithubException as e:
                # Malformed or unknown SHAs come back as 422
                if e.status == 422:
                    raise CommitNotFoundError(commit_hash) from e
                raise
            self._commits[commit_hash] = commit
        return self._commits[commit_hash]

    def resolve_commit(self, commit_hash: str) -> CommitInfo:
        git_commit = self._get_commit(commit_hash).commit
        return CommitInfo(
            message=git_commit.message or "",
            committed_date=_format_date(git_commit.committer.date),
        )

    def list_changed_files(self, commit_hash: str) -> set[str]:
        commit = self._get_commit(commit_hash)
        return {f.filename for f in _with_retries(lambda: list(commit.files), f"files of {commit_hash}")}
