"""Models for teams, fixtures, rankings, and calendar-day buckets."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Statuses under which a non-null score is a real result worth showing
SCORED_STATUSES = frozenset({"FINISHED", "LIVE", "IN_PLAY"})

UNKNOWN_TEAM = "Unknown"


# Instants this close to the datetime range edges overflow in some local zone
_MIN_INSTANT = datetime.min.replace(tzinfo=timezone.utc) + timedelta(days=1)
_MAX_INSTANT = datetime.max.replace(tzinfo=timezone.utc) - timedelta(days=1)


def parse_utc_date(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    A trailing ``Z`` is accepted and naive timestamps are read as UTC.
    Returns None when the value cannot be parsed, or when the instant lies
    within a day of the representable range and so cannot be shown in
    every timezone.
    """
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        dt = dt.astimezone(timezone.utc)
    except (AttributeError, ValueError, OverflowError):
        return None
    if not _MIN_INSTANT <= dt <= _MAX_INSTANT:
        return None
    return dt


class ViewModel(BaseModel):
    """Immutable value object dumped with the camelCase wire names."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TeamRef(ViewModel):
    id: int | None = None
    name: str = UNKNOWN_TEAM


class Score(ViewModel):
    home: int | None = None
    away: int | None = None

    @property
    def is_complete(self) -> bool:
        return self.home is not None and self.away is not None


class CanonicalFixture(ViewModel):
    match_id: int
    utc_date: str
    status: str = "SCHEDULED"
    competition_name: str = ""
    home_team: TeamRef
    away_team: TeamRef
    score: Score = Score()
    quick_tag: str | None = None

    @property
    def kickoff_at(self) -> datetime:
        dt = parse_utc_date(self.utc_date)
        if dt is None:
            raise ValueError(f"Unparseable utcDate on match {self.match_id}: {self.utc_date!r}")
        return dt


class RankingFixture(ViewModel):
    """The fixture subset a leaderboard row carries."""

    match_id: int
    home_team: TeamRef
    away_team: TeamRef
    utc_date: str | None = None


class RankingItem(ViewModel):
    fixture: RankingFixture
    score: float | None = None  # None: no usable score upstream


class Rankings(ViewModel):
    high_goals: tuple[RankingItem, ...] = ()
    high_btts: tuple[RankingItem, ...] = Field(default=(), alias="highBTTS")
    mismatch: tuple[RankingItem, ...] = ()


class DateBucket(ViewModel):
    date_key: str  # YYYY-MM-DD in the display timezone
    fixtures: tuple[CanonicalFixture, ...] = ()
