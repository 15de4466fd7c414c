"""Tests for pickinfo.collect — a whole run against fake GitHub queries."""

from __future__ import annotations

import pytest
from conftest import FakeQueries, make_issue

from pickinfo.collect import collect_picks
from pickinfo.github.queries import CommitNotFoundError


class TestCollectPicks:
    def test_run(self, fake_queries: FakeQueries):
        fake_queries.issues = [
            make_issue(number=1, body="facebook/react-native#46420"),
            make_issue(number=2, body="facebook/react-native#46600 facebook/react-native@81e8c39abc"),
            make_issue(number=3, body="facebook/react-native#46500"),
            make_issue(number=4, body="no links, just vibes"),
        ]
        run = collect_picks(fake_queries, "0.76.0-rc3")

        assert run.target_release == "0.76.0-rc3"
        assert [p.issue_number for p in run.picks] == [1, 2, 2]
        assert [d.issue_number for d in run.discuss] == [3, 4]
        assert run.tally.count("Libraries/Core.js") == 2
        assert fake_queries.calls[:2] == [
            ("project", "0.76.0-rc3"),
            ("inbox", "PVT_kwDOB", "0.76.0-rc3"),
        ]

    def test_flagged_issue_files_not_tallied(self, fake_queries: FakeQueries):
        fake_queries.issues = [
            make_issue(number=1, body="facebook/react-native#46420"),
            make_issue(number=2, body="facebook/react-native#46600 facebook/react-native#46500"),
        ]
        run = collect_picks(fake_queries, "0.76.0-rc3")

        assert [p.issue_number for p in run.picks] == [1]
        assert run.tally.count("Libraries/Core.js") == 1
        assert run.tally.colliding_paths() == []

    def test_unknown_commit_aborts_run(self, fake_queries: FakeQueries):
        fake_queries.issues = [
            make_issue(number=1, body="facebook/react-native#46420"),
            make_issue(number=2, body="facebook/react-native@0000000abc"),
        ]
        with pytest.raises(CommitNotFoundError):
            collect_picks(fake_queries, "0.76.0-rc3")

    def test_empty_inbox(self, fake_queries: FakeQueries):
        run = collect_picks(fake_queries, "0.76.0-rc3")
        assert run.picks == []
        assert run.discuss == []
        assert len(run.tally) == 0
