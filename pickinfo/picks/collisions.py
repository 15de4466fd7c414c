"""File collision tally across all picks of a run.

Two picks touching the same file are likely to conflict when cherry-picked
onto the release branch. The tally only flags them; it never drops a pick.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping

from pickinfo.picks.models import Pick


class CollisionTally:
    """Number of distinct picks touching each file path."""

    def __init__(self, counts: Mapping[str, int] | None = None) -> None:
        self._counts: dict[str, int] = dict(counts or {})

    def count(self, path: str) -> int:
        return self._counts.get(path, 0)

    def is_collision(self, path: str) -> bool:
        return self.count(path) > 1

    def collisions_for(self, pick: Pick) -> list[str]:
        """Files of `pick` that some other pick also touches, sorted."""
        return sorted(path for path in pick.files if self.is_collision(path))

    def colliding_paths(self) -> list[str]:
        return sorted(path for path, count in self._counts.items() if count > 1)

    def __len__(self) -> int:
        return len(self._counts)


def build_collision_tally(picks: Iterable[Pick]) -> CollisionTally:
    counts: Counter[str] = Counter()
    for pick in picks:
        # files is a set, so a pick counts once per path
        counts.update(pick.files)
    return CollisionTally(counts)
