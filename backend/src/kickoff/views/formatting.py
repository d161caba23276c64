"""Display strings for canonical fixtures and scores."""

from __future__ import annotations

from datetime import date, datetime

from kickoff.models.fixtures import SCORED_STATUSES, CanonicalFixture, RankingFixture
from kickoff.models.insights import TeamSummary
from kickoff.views.calendar import to_local

PLACEHOLDER = "—"


def _kickoff(value: CanonicalFixture | str | datetime) -> str | datetime:
    return value.utc_date if isinstance(value, CanonicalFixture) else value


def _clock(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {meridiem}"


def format_kickoff_time(value: CanonicalFixture | str | datetime, tz: str) -> str:
    """Local kickoff time, e.g. ``2:30 PM``."""
    return _clock(to_local(_kickoff(value), tz))


def format_kickoff_long(value: CanonicalFixture | str | datetime, tz: str) -> str:
    """Local kickoff with day, e.g. ``Sat, Mar 9, 11:30 PM``."""
    dt = to_local(_kickoff(value), tz)
    return f"{dt:%a}, {dt:%b} {dt.day}, {_clock(dt)}"


def format_date_heading(date_key: str) -> str:
    """Bucket heading for a YYYY-MM-DD key, e.g. ``Saturday, March 9``."""
    d = date.fromisoformat(date_key)
    return f"{d:%A}, {d:%B} {d.day}"


def format_score(fixture: CanonicalFixture) -> str:
    """``home–away`` for a played or live match with both sides known.

    Anything else gets the placeholder, so a missing result never reads
    as ``0–0``.
    """
    score = fixture.score
    if fixture.status in SCORED_STATUSES and score.is_complete:
        return f"{score.home}–{score.away}"
    return PLACEHOLDER


def format_metric(value: float | None, missing: str = PLACEHOLDER) -> str:
    """Two-decimal rendering of a [0, 1] metric."""
    if value is None:
        return missing
    return f"{value:.2f}"


def format_quick_tag(fixture: CanonicalFixture) -> str:
    return fixture.quick_tag or PLACEHOLDER


def format_competition(fixture: CanonicalFixture) -> str:
    return fixture.competition_name or "Unknown Competition"


def teams_label(fixture: CanonicalFixture | RankingFixture) -> str:
    return f"{fixture.home_team.name} vs {fixture.away_team.name}"


def form_letters(summary: TeamSummary | None) -> list[str]:
    if summary is None:
        return []
    return list(summary.form_string)
