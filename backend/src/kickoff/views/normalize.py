"""Canonicalize fixture, insight, ranking and team payloads.

Upstream payloads are loose: teams arrive as plain names or as ``{id, name}``
objects, fixtures arrive bare or wrapped in ``{fixture, tags, ...}`` envelopes,
and ranking scores arrive as numbers or as objects of named sub-scores. All of
that variance is resolved here so the rest of the package only sees the models
in ``kickoff.models``.

Nothing in this module raises on bad input. Records that cannot be recovered
come back as None and are dropped from batches; every record in a batch is
processed independently of its siblings.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from kickoff.models.fixtures import (
    UNKNOWN_TEAM,
    CanonicalFixture,
    RankingFixture,
    RankingItem,
    Rankings,
    Score,
    TeamRef,
    parse_utc_date,
)
from kickoff.models.insights import (
    DashboardView,
    InsightCard,
    InsightScores,
    MatchPreview,
    RecentMatchRow,
    TeamInsights,
    TeamPreview,
    TeamSummary,
    UpcomingView,
)
from kickoff.views.metrics import RESULT_POINTS, compute_insight_scores, form_points

logger = logging.getLogger(__name__)

# Sub-scores a ranking may carry instead of a plain number, in preference order
RANKING_SUB_SCORES = ("bttsScore", "over25Score", "formMismatchScore")

# Ranking column key → accepted wire spellings
RANKING_COLUMNS: dict[str, tuple[str, ...]] = {
    "high_goals": ("highGoals", "high_goals"),
    "high_btts": ("highBTTS", "highBtts", "high_btts"),
    "mismatch": ("mismatch",),
}


# ── Scalar coercion ──────────────────────────────────────────────────────────

def _to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if text.removeprefix("-").isdecimal():
            return int(text)
    return None


def _to_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def _to_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _first_present(raw: Mapping, *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _as_mapping(raw: Any) -> Mapping | None:
    """Accept plain mappings and our own models (via their wire dump)."""
    if isinstance(raw, BaseModel):
        return raw.model_dump(by_alias=True)
    if isinstance(raw, Mapping):
        return raw
    return None


def _as_sequence(raw: Any) -> list:
    if isinstance(raw, (list, tuple)):
        return list(raw)
    return []


# ── Shape rules ──────────────────────────────────────────────────────────────

def normalize_team(raw: Any) -> TeamRef:
    """Team name string, ``{id, name}`` object, or anything else → TeamRef."""
    if isinstance(raw, TeamRef):
        return raw
    if isinstance(raw, str):
        return TeamRef(name=raw.strip() or UNKNOWN_TEAM)
    if isinstance(raw, Mapping):
        return TeamRef(
            id=_to_int(raw.get("id")),
            name=_to_str(raw.get("name")) or UNKNOWN_TEAM,
        )
    return TeamRef()


def unwrap_envelope(item: Any) -> Any:
    """Return the nested ``fixture`` object of a wrapper, else the item itself."""
    if isinstance(item, Mapping) and isinstance(item.get("fixture"), Mapping):
        return item["fixture"]
    return item


def resolve_tags(item: Any) -> tuple[str, ...]:
    if not isinstance(item, Mapping):
        return ()
    return tuple(t for t in (_to_str(tag) for tag in _as_sequence(item.get("tags"))) if t)


def resolve_quick_tag(item: Any) -> str | None:
    """First tag of the envelope, else an explicit ``quickTag``, else None."""
    if not isinstance(item, Mapping):
        return None
    tags = _as_sequence(item.get("tags"))
    if tags:
        first = _to_str(tags[0])
        if first:
            return first
    explicit = _to_str(item.get("quickTag"))
    if explicit:
        return explicit
    return _to_str(unwrap_envelope(item).get("quickTag"))


def resolve_ranking_score(item: Any) -> float | None:
    """Single numeric score of a ranking item; None when none is usable.

    A plain number wins. Otherwise the first present sub-score of
    ``bttsScore``, ``over25Score``, ``formMismatchScore`` is used.
    """
    if not isinstance(item, Mapping):
        return None
    raw = item.get("score")
    plain = _to_float(raw)
    if plain is not None:
        return plain
    if isinstance(raw, Mapping):
        for key in RANKING_SUB_SCORES:
            sub = _to_float(raw.get(key))
            if sub is not None:
                return sub
    return None


def _resolve_teams(data: Mapping) -> tuple[TeamRef, TeamRef]:
    home = data.get("homeTeam")
    away = data.get("awayTeam")
    teams = data.get("teams")
    if isinstance(teams, Mapping):
        # Legacy table rows carry teams as {home, away}
        if home is None:
            home = teams.get("home")
        if away is None:
            away = teams.get("away")
    return normalize_team(home), normalize_team(away)


def _resolve_competition(data: Mapping) -> str:
    comp = data.get("competition")
    if isinstance(comp, Mapping):
        name = _to_str(comp.get("name"))
    else:
        name = _to_str(comp)
    return name or _to_str(data.get("competitionName")) or ""


def _resolve_score(data: Mapping) -> Score:
    raw = data.get("score")
    if isinstance(raw, Mapping):
        if "home" not in raw and isinstance(raw.get("fullTime"), Mapping):
            raw = raw["fullTime"]
        return Score(home=_to_int(raw.get("home")), away=_to_int(raw.get("away")))
    return Score(home=_to_int(data.get("homeScore")), away=_to_int(data.get("awayScore")))


def _resolve_match_id(data: Mapping) -> int | None:
    return _to_int(_first_present(data, "matchId", "id"))


# ── Fixtures ─────────────────────────────────────────────────────────────────

def parse_fixture(raw: Any) -> CanonicalFixture | None:
    """Canonicalize one fixture, bare or enveloped. None if unrecoverable."""
    if isinstance(raw, CanonicalFixture):
        return raw
    item = _as_mapping(raw)
    if item is None:
        logger.debug(f"Dropping non-object fixture record: {type(raw).__name__}")
        return None
    data = unwrap_envelope(item)

    match_id = _resolve_match_id(data)
    if not match_id:
        logger.debug("Dropping fixture without matchId")
        return None

    utc_date = _to_str(data.get("utcDate"))
    if utc_date is None or parse_utc_date(utc_date) is None:
        logger.debug(f"Dropping fixture {match_id}: bad utcDate {data.get('utcDate')!r}")
        return None

    home, away = _resolve_teams(data)
    if not home.name or not away.name:
        logger.debug(f"Dropping fixture {match_id}: missing team name")
        return None

    status = _to_str(data.get("status"))
    return CanonicalFixture(
        match_id=match_id,
        utc_date=utc_date,
        status=status.upper() if status else "SCHEDULED",
        competition_name=_resolve_competition(data),
        home_team=home,
        away_team=away,
        score=_resolve_score(data),
        quick_tag=resolve_quick_tag(item),
    )


def normalize_fixtures(items: Any) -> list[CanonicalFixture]:
    """Canonicalize a batch, dropping records that fail validation."""
    fixtures: list[CanonicalFixture] = []
    records = _as_sequence(items)
    for idx, raw in enumerate(records):
        try:
            fixture = parse_fixture(raw)
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning(f"Skipping fixture record {idx}: {e}")
            continue
        if fixture is not None:
            fixtures.append(fixture)

    dropped = len(records) - len(fixtures)
    if dropped:
        logger.debug(f"Dropped {dropped} of {len(records)} fixture records")
    return fixtures


# ── Team summaries and recent matches ────────────────────────────────────────

def _form_string(raw: Any) -> str:
    if isinstance(raw, str):
        letters = raw.upper()
    else:
        letters = "".join(str(r).strip().upper()[:1] for r in _as_sequence(raw))
    return "".join(c for c in letters if c in RESULT_POINTS)


def parse_team_summary(raw: Any) -> TeamSummary | None:
    """Read a team summary in camelCase or legacy snake_case form."""
    if isinstance(raw, TeamSummary):
        return raw
    data = _as_mapping(raw)
    if not data:
        return None

    def count(*keys: str) -> int | None:
        return _to_int(_first_present(data, *keys))

    def rate(*keys: str) -> float:
        value = _to_float(_first_present(data, *keys))
        return value if value is not None else 0.0

    played = count("matchesPlayed", "matches_played", "played") or 0
    wins = count("wins", "won")
    draws = count("draws", "drawn")
    losses = count("losses", "lost")
    goals_for = count("goalsFor", "goals_for") or 0
    goals_against = count("goalsAgainst", "goals_against") or 0
    form = _form_string(_first_present(data, "formString", "form_string", "form", "recent_form"))

    points = count("points")
    if points is None:
        if wins is not None or draws is not None:
            points = 3 * (wins or 0) + (draws or 0)
        else:
            points = form_points(form)

    avg_for = _to_float(_first_present(data, "avgGoalsFor", "avg_goals_for"))
    avg_against = _to_float(_first_present(data, "avgGoalsAgainst", "avg_goals_against"))
    if avg_for is None:
        avg_for = goals_for / played if played else 0.0
    if avg_against is None:
        avg_against = goals_against / played if played else 0.0

    team = data.get("team")
    return TeamSummary(
        team_id=count("teamId", "team_id") if team is None else normalize_team(team).id,
        team_name=_to_str(_first_present(data, "teamName", "team_name"))
        or (normalize_team(team).name if team is not None else None),
        matches_played=played,
        wins=wins or 0,
        draws=draws or 0,
        losses=losses or 0,
        points=points,
        goals_for=goals_for,
        goals_against=goals_against,
        avg_goals_for=avg_for,
        avg_goals_against=avg_against,
        btts_rate=rate("bttsRate", "btts_rate"),
        over25_rate=rate("over25Rate", "over25_rate"),
        clean_sheet_rate=rate("cleanSheetRate", "clean_sheet_rate"),
        form_string=form,
    )


def parse_recent_match(raw: Any) -> RecentMatchRow | None:
    data = _as_mapping(raw)
    if data is None:
        return None
    date = _to_str(data.get("date"))
    score_for = _to_int(data.get("scoreFor"))
    score_against = _to_int(data.get("scoreAgainst"))
    if date is None or score_for is None or score_against is None:
        return None

    venue = (_to_str(data.get("homeAway")) or "").upper()
    home_away = "HOME" if venue in ("HOME", "H") else "AWAY"

    result = (_to_str(data.get("result")) or "").upper()[:1]
    if result not in RESULT_POINTS:
        if score_for > score_against:
            result = "W"
        elif score_for == score_against:
            result = "D"
        else:
            result = "L"

    opponent = _to_str(data.get("opponentName")) or normalize_team(data.get("opponent")).name
    return RecentMatchRow(
        date=date,
        opponent_name=opponent,
        home_away=home_away,
        score_for=score_for,
        score_against=score_against,
        result=result,
    )


def _recent_matches(raw: Any) -> tuple[RecentMatchRow, ...]:
    rows = (parse_recent_match(r) for r in _as_sequence(raw))
    return tuple(r for r in rows if r is not None)


# ── Rankings ─────────────────────────────────────────────────────────────────

def parse_ranking_item(raw: Any) -> RankingItem | None:
    """Canonicalize a leaderboard row; only a matchId is required."""
    if isinstance(raw, RankingItem):
        return raw
    item = _as_mapping(raw)
    if item is None:
        return None
    data = unwrap_envelope(item)

    match_id = _resolve_match_id(data)
    if not match_id:
        logger.debug("Dropping ranking item without matchId")
        return None

    utc_date = _to_str(data.get("utcDate"))
    if utc_date is not None and parse_utc_date(utc_date) is None:
        utc_date = None

    home, away = _resolve_teams(data)
    return RankingItem(
        fixture=RankingFixture(
            match_id=match_id,
            home_team=home,
            away_team=away,
            utc_date=utc_date,
        ),
        score=resolve_ranking_score(item),
    )


def _ranking_column(raw: Any, limit: int | None) -> tuple[RankingItem, ...]:
    items: list[RankingItem] = []
    for idx, entry in enumerate(_as_sequence(raw)):
        try:
            item = parse_ranking_item(entry)
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning(f"Skipping ranking item {idx}: {e}")
            continue
        if item is not None:
            items.append(item)
    if limit is not None:
        items = items[:max(limit, 0)]
    return tuple(items)


def normalize_rankings(raw: Any, limit: int | None = None) -> Rankings:
    """Canonicalize the three leaderboards, keeping upstream order."""
    data = _as_mapping(raw)
    if data is None:
        return Rankings()
    columns = {
        field: _ranking_column(_first_present(data, *keys), limit)
        for field, keys in RANKING_COLUMNS.items()
    }
    return Rankings(**columns)


# ── Insight cards and page payloads ──────────────────────────────────────────

def _resolve_scores(data: Mapping) -> InsightScores | None:
    """Scores from a nested ``scores`` object or flat card fields."""
    source = data.get("scores")
    if not isinstance(source, Mapping):
        source = data
    values = [_to_float(source.get(key)) for key in RANKING_SUB_SCORES]
    if any(v is None for v in values):
        return None
    btts, over25, mismatch = values
    return InsightScores(btts_score=btts, over25_score=over25, form_mismatch_score=mismatch)


def _scores_or_computed(
    data: Mapping,
    home: TeamSummary | None,
    away: TeamSummary | None,
    window: int,
) -> InsightScores | None:
    scores = _resolve_scores(data)
    if scores is None and home is not None and away is not None:
        scores = compute_insight_scores(home, away, window)
    return scores


def parse_insight_card(raw: Any, window: int) -> InsightCard | None:
    """Canonicalize a spotlight card, filling in scores from summaries if absent.

    ``window`` is the trailing window size both summaries were built over.
    """
    if isinstance(raw, InsightCard):
        return raw
    data = _as_mapping(raw)
    if data is None:
        return None
    fixture = parse_fixture(data)
    if fixture is None:
        return None

    home = parse_team_summary(_first_present(data, "homeSummary", "homeForm"))
    away = parse_team_summary(_first_present(data, "awaySummary", "awayForm"))
    return InsightCard(
        fixture=fixture,
        home_summary=home,
        away_summary=away,
        scores=_scores_or_computed(data, home, away, window),
        tags=resolve_tags(data),
    )


def normalize_insight_cards(items: Any, window: int) -> list[InsightCard]:
    cards: list[InsightCard] = []
    for idx, raw in enumerate(_as_sequence(items)):
        try:
            card = parse_insight_card(raw, window)
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning(f"Skipping insight card {idx}: {e}")
            continue
        if card is not None:
            cards.append(card)
    return cards


def _team_preview(raw: Any, fallback: TeamRef) -> TeamPreview:
    data = _as_mapping(raw) or {}
    if data.get("team") is not None:
        team = normalize_team(data["team"])
    else:
        team = TeamRef(id=fallback.id, name=_to_str(data.get("teamName")) or fallback.name)
    return TeamPreview(
        team=team,
        summary=parse_team_summary(data.get("summary")),
        recent_matches=_recent_matches(data.get("recentMatches")),
    )


def parse_match_preview(raw: Any, window: int) -> MatchPreview | None:
    if isinstance(raw, MatchPreview):
        return raw
    data = _as_mapping(raw)
    if data is None:
        return None
    match = parse_fixture({"fixture": data.get("match"), "tags": data.get("tags")})
    if match is None:
        return None

    home = _team_preview(data.get("home"), match.home_team)
    away = _team_preview(data.get("away"), match.away_team)
    bullets = (_to_str(b) for b in _as_sequence(data.get("whyBullets")))
    return MatchPreview(
        match=match,
        tags=resolve_tags(data),
        scores=_scores_or_computed(data, home.summary, away.summary, window),
        why_bullets=tuple(b for b in bullets if b),
        home=home,
        away=away,
    )


def parse_team_insights(raw: Any) -> TeamInsights | None:
    """Team page payload in the current or the legacy ``stats`` shape."""
    if isinstance(raw, TeamInsights):
        return raw
    data = _as_mapping(raw)
    if data is None or data.get("team") is None:
        return None
    team = normalize_team(data["team"])

    summary_raw = dict(_as_mapping(_first_present(data, "summary", "stats")) or {})
    if data.get("recent_form") is not None:
        summary_raw.setdefault("formString", data["recent_form"])
    if summary_raw:
        summary_raw.setdefault("teamId", team.id)
        summary_raw.setdefault("teamName", team.name)
    upcoming = (_to_int(i) for i in _as_sequence(_first_present(data, "upcomingFixtureIds", "upcoming_fixtures")))

    return TeamInsights(
        team=team,
        summary=parse_team_summary(summary_raw),
        recent_matches=_recent_matches(data.get("recentMatches")),
        upcoming_fixture_ids=tuple(i for i in upcoming if i),
    )


def parse_dashboard(raw: Any, window: int, rankings_limit: int | None = None) -> DashboardView:
    data = _as_mapping(raw)
    if data is None:
        return DashboardView()
    return DashboardView(
        date=_to_str(data.get("date")),
        spotlight=tuple(normalize_insight_cards(data.get("spotlight"), window)),
        rankings=normalize_rankings(data.get("rankings"), rankings_limit),
        fixtures_table=tuple(normalize_fixtures(data.get("fixturesTable"))),
    )


def parse_upcoming(raw: Any, window: int) -> UpcomingView:
    data = _as_mapping(raw)
    if data is None:
        return UpcomingView()
    return UpcomingView(
        date_from=_to_str(data.get("dateFrom")),
        date_to=_to_str(data.get("dateTo")),
        range=_to_str(data.get("range")),
        fixtures=tuple(normalize_fixtures(data.get("fixtures"))),
        spotlight=tuple(normalize_insight_cards(data.get("spotlight"), window)),
    )
