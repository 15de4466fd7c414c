"""Per-issue classification into picks or items to discuss.

An issue walks through a small workflow:

    NO_REFERENCES --start--> HAS_REFERENCES --finish--> ALL_RESOLVED
          |                                        \\-> PARTIALLY_FLAGGED
          +------------------finish------------------> ALL_RESOLVED (no picks)

A pull request without a landed commit flags the issue. A flagged issue is
reported for discussion as a whole, even when other references in it did
resolve: if any part of a pick is undecided, the pick is undecided. An issue
with no references at all, or no picks, is also reported for discussion.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from pickinfo.picks.links import Reference, parse_commit_links, parse_pull_request_links
from pickinfo.picks.models import DiscussItem, InboxIssue, Pick
from pickinfo.picks.resolver import ResolvedCommit, Resolver, Unresolved, first_line

logger = logging.getLogger(__name__)


class IssueState(enum.Enum):
    NO_REFERENCES = "no_references"
    HAS_REFERENCES = "has_references"
    ALL_RESOLVED = "all_resolved"
    PARTIALLY_FLAGGED = "partially_flagged"


@dataclass
class IssueClassification:
    issue: InboxIssue
    state: IssueState
    picks: list[Pick] = field(default_factory=list)
    discuss: DiscussItem | None = None


class IssueWorkflow:
    """Accumulates resolutions for one issue and decides its outcome."""

    def __init__(self, issue: InboxIssue) -> None:
        self.issue = issue
        self.state = IssueState.NO_REFERENCES
        self.picks: list[Pick] = []
        self.base_ref_name: str | None = None
        self.head_ref_name: str | None = None
        self._flagged = False

    @property
    def flagged(self) -> bool:
        return self._flagged

    def start(self, references: list[Reference]) -> None:
        if references:
            self.state = IssueState.HAS_REFERENCES

    def note_branches(self, base_ref_name: str | None, head_ref_name: str | None) -> None:
        """Remember the branches of the latest pull request looked up."""
        self.base_ref_name = base_ref_name
        self.head_ref_name = head_ref_name

    def add_pick(self, pick: Pick) -> None:
        self._require_resolving()
        self.picks.append(pick)

    def flag(self, unresolved: Unresolved) -> None:
        self._require_resolving()
        self._flagged = True
        logger.info(
            f"Issue #{self.issue.number} flagged: {unresolved.reference.raw} has no landed commit"
        )

    def finish(self) -> IssueClassification:
        # No references ends resolved with zero picks
        self.state = IssueState.PARTIALLY_FLAGGED if self._flagged else IssueState.ALL_RESOLVED

        if self._flagged or not self.picks:
            return IssueClassification(
                issue=self.issue,
                state=self.state,
                discuss=DiscussItem(
                    created_at=self.issue.created_at,
                    title=self.issue.title,
                    issue_number=self.issue.number,
                    url=self.issue.url,
                    base_ref_name=self.base_ref_name,
                    head_ref_name=self.head_ref_name,
                ),
            )
        return IssueClassification(issue=self.issue, state=self.state, picks=list(self.picks))

    def _require_resolving(self) -> None:
        if self.state != IssueState.HAS_REFERENCES:
            raise RuntimeError(
                f"Issue #{self.issue.number} is not resolving references (state {self.state.value})"
            )


def _pick_from_pull_request(issue: InboxIssue, resolved: ResolvedCommit) -> Pick:
    return Pick(
        commit_hash=resolved.commit_hash,
        created_at=issue.created_at,
        title=issue.title,
        issue_number=issue.number,
        url=issue.url,
        files=resolved.files,
        base_ref_name=resolved.base_ref_name,
        head_ref_name=resolved.head_ref_name,
    )


def _pick_from_commit(issue: InboxIssue, resolved: ResolvedCommit) -> Pick:
    return Pick(
        commit_hash=resolved.commit_hash,
        created_at=resolved.committed_date or issue.created_at,
        title=f"{issue.title} ({first_line(resolved.message)})",
        issue_number=issue.number,
        url=issue.url,
        files=resolved.files,
    )


def _landed_by_pull_request(reference: Reference, picks: list[Pick]) -> bool:
    """True when a commit reference names (a prefix of) a commit already picked via a PR."""
    return any(pick.commit_hash.lower().startswith(reference.target) for pick in picks)


def classify_issue(issue: InboxIssue, resolver: Resolver) -> IssueClassification:
    """Resolve every reference in an issue body and classify the issue.

    All references are resolved even after the issue is flagged, so a
    missing commit still aborts the run.
    """
    pull_requests = parse_pull_request_links(issue.body)
    commits = parse_commit_links(issue.body)

    workflow = IssueWorkflow(issue)
    workflow.start(pull_requests + commits)

    for reference in pull_requests:
        result = resolver.resolve(reference)
        workflow.note_branches(result.base_ref_name, result.head_ref_name)
        if isinstance(result, Unresolved):
            workflow.flag(result)
        else:
            workflow.add_pick(_pick_from_pull_request(issue, result))

    for reference in commits:
        if _landed_by_pull_request(reference, workflow.picks):
            logger.debug(f"Issue #{issue.number}: {reference.raw} already picked through its PR")
            continue
        result = resolver.resolve(reference)
        workflow.add_pick(_pick_from_commit(issue, result))

    classification = workflow.finish()
    logger.debug(
        f"Issue #{issue.number}: {classification.state.value}, {len(classification.picks)} pick(s)"
    )
    return classification
