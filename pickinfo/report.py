"""Text report of picks and items to discuss.

Lines are rich markup strings; user-supplied text is escaped so titles
like "[iOS] Fix crash" print as written.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar, Union

from rich.markup import escape

from pickinfo.picks.collisions import CollisionTally
from pickinfo.picks.models import DiscussItem, Pick

SORT_DIRECTIONS = ("asc", "desc")
COLLISION_PREFIX = " - "
ELLIPSIS = "..."
COLLISION_STYLE = "bold red"

Item = TypeVar("Item", bound=Union[Pick, DiscussItem])


def sort_items(items: Sequence[Item], direction: str = "asc") -> list[Item]:
    """Sort by timestamp. Ties keep input order; 'desc' is exactly 'asc' reversed."""
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"Sort direction must be one of {SORT_DIRECTIONS}, got '{direction}'")
    ordered = sorted(items, key=lambda item: item.timestamp)
    if direction == "desc":
        ordered.reverse()
    return ordered


def format_result_line(pick: Pick, verbose: bool = False) -> str:
    line = f"{pick.short_hash} : {pick.created_at}"
    return f"{line} : {escape(pick.title)}" if verbose else line


def elide_path(path: str, max_width: int, prefix: str = COLLISION_PREFIX) -> str:
    """Cut a path from the left so that prefix + path fits in max_width."""
    if len(path) + len(prefix) <= max_width:
        return path
    keep = max(max_width - len(prefix) - len(ELLIPSIS), 0)
    return ELLIPSIS + (path[-keep:] if keep else "")


def format_file_collisions(files: Sequence[str], max_width: int) -> list[str]:
    return [
        f"{COLLISION_PREFIX}[{COLLISION_STYLE}]{escape(elide_path(path, max_width))}[/{COLLISION_STYLE}]"
        for path in files
    ]


def format_discuss_item(item: DiscussItem) -> str:
    lines = [f"{item.issue_number} : {escape(item.title)}"]
    if item.base_ref_name:
        branch = f" - branch : {escape(item.base_ref_name)}"
        if item.head_ref_name:
            branch += f" <- {escape(item.head_ref_name)}"
        lines.append(branch)
    if item.url:
        lines.append(f" - {item.url}")
    return "\n".join(lines)


def render_report(
    picks: Sequence[Pick],
    discuss: Sequence[DiscussItem],
    tally: CollisionTally,
    *,
    direction: str = "asc",
    verbose: bool = False,
    max_width: int = 80,
) -> list[str]:
    """Render the whole report as a list of lines."""
    lines: list[str] = []
    for pick in sort_items(picks, direction):
        lines.append(format_result_line(pick, verbose))
        lines.extend(format_file_collisions(tally.collisions_for(pick), max_width))

    lines.append("")
    lines.append(f"Total picks ({len(picks)})")

    if discuss:
        lines.append("")
        lines.append(f"To discuss ({len(discuss)}):")
        for item in sort_items(discuss, direction):
            lines.append(format_discuss_item(item))
    return lines
