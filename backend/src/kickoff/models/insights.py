"""Models for team summaries, insight scores, and page-level view models."""

from __future__ import annotations

from typing import Literal

from kickoff.models.fixtures import CanonicalFixture, Rankings, TeamRef, ViewModel


class TeamSummary(ViewModel):
    """Aggregates over a team's trailing window of finished matches."""

    team_id: int | None = None
    team_name: str | None = None
    matches_played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    points: int = 0
    goals_for: int = 0
    goals_against: int = 0
    avg_goals_for: float = 0.0
    avg_goals_against: float = 0.0
    btts_rate: float = 0.0
    over25_rate: float = 0.0
    clean_sheet_rate: float = 0.0
    form_string: str = ""  # W/D/L letters, most recent first


class InsightScores(ViewModel):
    btts_score: float
    over25_score: float
    form_mismatch_score: float


class RecentMatchRow(ViewModel):
    date: str
    opponent_name: str
    home_away: Literal["HOME", "AWAY"]
    score_for: int
    score_against: int
    result: Literal["W", "D", "L"]


class InsightCard(ViewModel):
    fixture: CanonicalFixture
    home_summary: TeamSummary | None = None
    away_summary: TeamSummary | None = None
    scores: InsightScores | None = None
    tags: tuple[str, ...] = ()


class TeamPreview(ViewModel):
    team: TeamRef
    summary: TeamSummary | None = None
    recent_matches: tuple[RecentMatchRow, ...] = ()


class MatchPreview(ViewModel):
    match: CanonicalFixture
    tags: tuple[str, ...] = ()
    scores: InsightScores | None = None
    why_bullets: tuple[str, ...] = ()
    home: TeamPreview
    away: TeamPreview


class TeamInsights(ViewModel):
    team: TeamRef
    summary: TeamSummary | None = None
    recent_matches: tuple[RecentMatchRow, ...] = ()
    upcoming_fixture_ids: tuple[int, ...] = ()


class DashboardView(ViewModel):
    date: str | None = None
    spotlight: tuple[InsightCard, ...] = ()
    rankings: Rankings = Rankings()
    fixtures_table: tuple[CanonicalFixture, ...] = ()


class UpcomingView(ViewModel):
    date_from: str | None = None
    date_to: str | None = None
    range: str | None = None
    fixtures: tuple[CanonicalFixture, ...] = ()
    spotlight: tuple[InsightCard, ...] = ()
