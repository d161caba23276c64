"""
Calendar bucketer tests

Covers:
1. Local date keys across daylight-saving transitions
2. Bucket ordering and tie-breaks
3. Today key and upcoming range windows
"""
from datetime import datetime, timezone

import pytest

from kickoff.models.fixtures import CanonicalFixture, TeamRef
from kickoff.views.calendar import bucket_by_local_date, local_date_key, resolve_range, today_key
from kickoff.views.normalize import normalize_fixtures

NY = "America/New_York"


def _fixture(match_id: int, utc_date: str) -> CanonicalFixture:
    return CanonicalFixture(
        match_id=match_id,
        utc_date=utc_date,
        home_team=TeamRef(name=f"Home {match_id}"),
        away_team=TeamRef(name=f"Away {match_id}"),
    )


class TestLocalDateKey:
    """local_date_key"""

    def test_before_spring_transition(self):
        assert local_date_key("2024-03-10T04:30:00Z", NY) == "2024-03-09"

    def test_summer_offset(self):
        # EDT is UTC-4, so 03:30Z is still the previous evening
        assert local_date_key("2024-07-01T03:30:00Z", NY) == "2024-06-30"
        assert local_date_key("2024-07-01T04:30:00Z", NY) == "2024-07-01"

    def test_around_fall_transition(self):
        assert local_date_key("2024-11-03T03:30:00Z", NY) == "2024-11-02"
        assert local_date_key("2024-11-03T04:30:00Z", NY) == "2024-11-03"

    def test_explicit_offset_and_naive_input(self):
        assert local_date_key("2024-03-09T20:00:00-05:00", NY) == "2024-03-09"
        assert local_date_key("2024-03-10T04:30:00", NY) == "2024-03-09"

    def test_other_timezone(self):
        assert local_date_key("2024-03-10T04:30:00Z", "Europe/London") == "2024-03-10"

    def test_unparseable(self):
        with pytest.raises(ValueError):
            local_date_key("yesterday", NY)


class TestBucketByLocalDate:
    """bucket_by_local_date"""

    def test_groups_by_local_day_not_utc_day(self):
        late = _fixture(1, "2024-03-10T04:30:00Z")   # Sat 23:30 EST
        early = _fixture(2, "2024-03-10T05:00:00Z")  # Sun 00:00 EST

        buckets = bucket_by_local_date([early, late], NY)

        assert [b.date_key for b in buckets] == ["2024-03-09", "2024-03-10"]
        assert buckets[0].fixtures == (late,)
        assert buckets[1].fixtures == (early,)

    def test_sorted_by_instant_then_match_id(self):
        a = _fixture(9, "2024-03-09T17:30:00Z")
        b = _fixture(3, "2024-03-09T17:30:00Z")
        c = _fixture(5, "2024-03-09T12:30:00-05:00")   # 17:30Z too
        d = _fixture(1, "2024-03-09T15:00:00Z")
        e = _fixture(2, "2024-03-09T20:00:00-05:00")   # 01:00Z next UTC day
        f = _fixture(4, "2024-03-10T00:30:00Z")

        buckets = bucket_by_local_date([a, b, c, d, e, f], NY)

        assert len(buckets) == 1
        assert [x.match_id for x in buckets[0].fixtures] == [1, 3, 5, 9, 4, 2]

    def test_buckets_ascending(self):
        fixtures = [
            _fixture(1, "2024-03-12T19:00:00Z"),
            _fixture(2, "2024-03-09T15:00:00Z"),
            _fixture(3, "2024-03-11T19:00:00Z"),
        ]
        keys = [b.date_key for b in bucket_by_local_date(fixtures, NY)]
        assert keys == ["2024-03-09", "2024-03-11", "2024-03-12"]

    def test_nothing_dropped(self):
        fixtures = [_fixture(i, f"2024-03-{9 + i % 3:02d}T18:00:00Z") for i in range(1, 10)]
        buckets = bucket_by_local_date(fixtures, NY)
        assert sum(len(b.fixtures) for b in buckets) == 9

    def test_empty(self):
        assert bucket_by_local_date([], NY) == []

    @pytest.mark.parametrize("tz", [NY, "Pacific/Kiritimati", "Pacific/Pago_Pago"])
    def test_normalized_fixtures_near_range_edges_always_bucket(self, wire_fixture, tz):
        raw = [
            {**wire_fixture, "matchId": 1, "utcDate": "0001-01-01T00:30:00Z"},
            {**wire_fixture, "matchId": 2, "utcDate": "0001-01-02T12:00:00Z"},
            {**wire_fixture, "matchId": 3, "utcDate": "9999-12-30T12:00:00Z"},
            {**wire_fixture, "matchId": 4, "utcDate": "9999-12-31T23:00:00-05:00"},
        ]

        buckets = bucket_by_local_date(normalize_fixtures(raw), tz)

        assert [f.match_id for b in buckets for f in b.fixtures] == [2, 3]


class TestRanges:
    """today_key / resolve_range"""

    # Wednesday 2024-03-13, 11:00 EDT
    NOW = datetime(2024, 3, 13, 15, 0, tzinfo=timezone.utc)

    def test_today_key_uses_local_day(self):
        assert today_key(NY, datetime(2024, 3, 10, 4, 30, tzinfo=timezone.utc)) == "2024-03-09"

    def test_today_and_tomorrow(self):
        assert resolve_range("today", NY, self.NOW) == ("2024-03-13", "2024-03-13")
        assert resolve_range("tomorrow", NY, self.NOW) == ("2024-03-14", "2024-03-14")

    def test_weekend_from_midweek(self):
        assert resolve_range("weekend", NY, self.NOW) == ("2024-03-16", "2024-03-17")

    def test_weekend_on_saturday_and_sunday(self):
        saturday = datetime(2024, 3, 16, 16, 0, tzinfo=timezone.utc)
        sunday = datetime(2024, 3, 17, 16, 0, tzinfo=timezone.utc)
        assert resolve_range("weekend", NY, saturday) == ("2024-03-16", "2024-03-17")
        assert resolve_range("weekend", NY, sunday) == ("2024-03-17", "2024-03-17")

    def test_next7(self):
        assert resolve_range("next7", NY, self.NOW) == ("2024-03-13", "2024-03-19")

    def test_unknown_range(self):
        with pytest.raises(ValueError):
            resolve_range("fortnight", NY, self.NOW)
