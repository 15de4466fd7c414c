"""Collects picks for a target release from its project board."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pickinfo.github.queries import GitHubQueries
from pickinfo.picks.classifier import classify_issue
from pickinfo.picks.collisions import CollisionTally, build_collision_tally
from pickinfo.picks.models import DiscussItem, Pick
from pickinfo.picks.resolver import Resolver

logger = logging.getLogger(__name__)


@dataclass
class PickRun:
    """Everything the report needs from one run."""

    target_release: str
    picks: list[Pick] = field(default_factory=list)
    discuss: list[DiscussItem] = field(default_factory=list)
    tally: CollisionTally = field(default_factory=CollisionTally)


def collect_picks(queries: GitHubQueries, target_release: str) -> PickRun:
    """Classify every inbox issue for `target_release`, one issue at a time.

    CommitNotFoundError propagates and aborts the run.
    """
    project_id = queries.resolve_project_id(target_release)
    issues = queries.list_inbox_issues(project_id, target_release)
    resolver = Resolver(queries)

    run = PickRun(target_release=target_release)
    for issue in issues:
        classification = classify_issue(issue, resolver)
        if classification.discuss is not None:
            run.discuss.append(classification.discuss)
        else:
            run.picks.extend(classification.picks)

    # Built only once every issue is classified
    run.tally = build_collision_tally(run.picks)
    logger.info(
        f"{len(run.picks)} pick(s), {len(run.discuss)} to discuss, "
        f"{len(run.tally.colliding_paths())} colliding file(s)"
    )
    return run
