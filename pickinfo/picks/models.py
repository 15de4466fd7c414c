"""Core data models for pickinfo."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

SHORT_HASH_LENGTH = 7


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO 8601 timestamp. Naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class InboxIssue:
    """A pick-request issue sitting in the board's inbox column."""

    number: int
    title: str
    body: str
    created_at: str  # ISO format date
    url: str


@dataclass(frozen=True)
class Pick:
    """One landed change resolved from a pick-request issue."""

    commit_hash: str
    created_at: str  # issue creation date for PR picks, commit date for commit picks
    title: str
    issue_number: int
    url: str
    files: frozenset[str] = field(default_factory=frozenset)
    base_ref_name: str | None = None
    head_ref_name: str | None = None

    def __post_init__(self) -> None:
        if not self.commit_hash:
            raise ValueError(f"Pick for issue #{self.issue_number} has no commit hash")

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:SHORT_HASH_LENGTH]

    @property
    def timestamp(self) -> datetime:
        return parse_timestamp(self.created_at)


@dataclass(frozen=True)
class DiscussItem:
    """An issue that could not be resolved to commits and needs a decision."""

    created_at: str
    title: str
    issue_number: int
    url: str
    base_ref_name: str | None = None
    head_ref_name: str | None = None

    @property
    def timestamp(self) -> datetime:
        return parse_timestamp(self.created_at)
