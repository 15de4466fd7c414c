"""Resolution of parsed references to concrete commits."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pickinfo.github.queries import GitHubQueries
from pickinfo.picks.links import COMMIT, PULL_REQUEST, Reference

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedCommit:
    reference: Reference
    commit_hash: str
    message: str = ""  # only fetched for commit references
    committed_date: str | None = None
    base_ref_name: str | None = None
    head_ref_name: str | None = None
    files: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Unresolved:
    """A pull request that has no landed commit yet."""

    reference: Reference
    base_ref_name: str | None = None
    head_ref_name: str | None = None


def first_line(message: str) -> str:
    return message.split("\n", 1)[0].strip()


class Resolver:
    """Turns references into commits through the GitHub query layer.

    Unknown commits raise CommitNotFoundError from the query layer; that is
    left to propagate since a report missing a referenced commit is wrong.
    """

    def __init__(self, queries: GitHubQueries) -> None:
        self._queries = queries

    def resolve(self, reference: Reference) -> ResolvedCommit | Unresolved:
        if reference.kind == PULL_REQUEST:
            return self._resolve_pull_request(reference)
        if reference.kind == COMMIT:
            return self._resolve_commit(reference)
        raise ValueError(f"Unknown reference kind: {reference.kind}")

    def _resolve_pull_request(self, reference: Reference) -> ResolvedCommit | Unresolved:
        pr = self._queries.resolve_pull_request(reference.number)
        if not pr.commit_hash:
            logger.info(f"PR #{reference.number} has no landed commit yet")
            return Unresolved(
                reference=reference,
                base_ref_name=pr.base_ref_name,
                head_ref_name=pr.head_ref_name,
            )
        return ResolvedCommit(
            reference=reference,
            commit_hash=pr.commit_hash,
            base_ref_name=pr.base_ref_name,
            head_ref_name=pr.head_ref_name,
            files=frozenset(self._queries.list_changed_files(pr.commit_hash)),
        )

    def _resolve_commit(self, reference: Reference) -> ResolvedCommit:
        info = self._queries.resolve_commit(reference.target)
        return ResolvedCommit(
            reference=reference,
            commit_hash=reference.target,
            message=info.message,
            committed_date=info.committed_date,
            files=frozenset(self._queries.list_changed_files(reference.target)),
        )
