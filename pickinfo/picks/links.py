"""Extraction of pull request and commit references from issue bodies.

Pick-request issues are free text filled in by humans, so references show up
in two shapes:

  - shorthand: facebook/react-native#46420, facebook/react-native@81e8c39
  - links:     https://github.com/facebook/react-native/pull/46420
               https://github.com/facebook/react-native/commit/81e8c39

A reference whose number or hash runs straight into other word characters
(`#46420abc`, `@81e8c39xyz`) is ignored rather than cut short.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

PULL_REQUEST = "pull_request"
COMMIT = "commit"

_OWNER_REPO = r"[\w.-]+/[\w.-]+"

PULL_REQUEST_PATTERN = re.compile(
    rf"(?:https?://github\.com/{_OWNER_REPO}/pull/|\b{_OWNER_REPO}#)(?P<target>\d+)(?!\w)"
)
COMMIT_PATTERN = re.compile(
    rf"(?:https?://github\.com/{_OWNER_REPO}/commit/|\b{_OWNER_REPO}@)(?P<target>[0-9a-fA-F]{{7,40}})(?!\w)"
)


@dataclass(frozen=True)
class Reference:
    kind: str  # "pull_request" | "commit"
    raw: str  # text as it appeared in the issue body
    target: str  # PR number or lower-cased commit hash

    @property
    def number(self) -> int:
        if self.kind != PULL_REQUEST:
            raise ValueError(f"{self.raw} is not a pull request reference")
        return int(self.target)


def _find(pattern: re.Pattern[str], kind: str, text: str) -> list[Reference]:
    references: list[Reference] = []
    seen: set[str] = set()
    for match in pattern.finditer(text or ""):
        target = match.group("target")
        if kind == COMMIT:
            target = target.lower()
        else:
            target = str(int(target))
        if target in seen:
            continue
        seen.add(target)
        references.append(Reference(kind=kind, raw=match.group(0), target=target))
    return references


def parse_pull_request_links(text: str) -> list[Reference]:
    """Find pull request references, first-seen order, one per PR number."""
    return _find(PULL_REQUEST_PATTERN, PULL_REQUEST, text)


def parse_commit_links(text: str) -> list[Reference]:
    """Find commit references, first-seen order, one per hash."""
    return _find(COMMIT_PATTERN, COMMIT, text)


def parse_references(text: str) -> list[Reference]:
    """All references in an issue body: pull requests first, then commits."""
    return parse_pull_request_links(text) + parse_commit_links(text)
