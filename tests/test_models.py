"""Tests for pickinfo.picks.models."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from conftest import make_pick

from pickinfo.picks.models import DiscussItem, parse_timestamp


class TestPick:
    def test_short_hash(self):
        assert make_pick(commit_hash="81e8c39abc").short_hash == "81e8c39"

    def test_short_hash_of_short_commit(self):
        assert make_pick(commit_hash="abc").short_hash == "abc"

    def test_empty_hash_rejected(self):
        with pytest.raises(ValueError):
            make_pick(commit_hash="")

    def test_frozen(self):
        pick = make_pick()
        with pytest.raises(AttributeError):
            pick.title = "changed"

    def test_timestamp(self):
        pick = make_pick(created_at="2024-09-10T12:00:00Z")
        assert pick.timestamp == datetime(2024, 9, 10, 12, 0, tzinfo=timezone.utc)


class TestDiscussItem:
    def test_defaults(self):
        item = DiscussItem(created_at="2024-09-10T12:00:00Z", title="T", issue_number=1, url="u")
        assert item.base_ref_name is None
        assert item.head_ref_name is None


class TestParseTimestamp:
    def test_zulu(self):
        assert parse_timestamp("2024-09-10T12:00:00Z").tzinfo is not None

    def test_offset(self):
        assert parse_timestamp("2024-09-10T14:00:00+02:00") == parse_timestamp("2024-09-10T12:00:00Z")

    def test_naive_is_utc(self):
        assert parse_timestamp("2024-09-10T12:00:00") == parse_timestamp("2024-09-10T12:00:00Z")
