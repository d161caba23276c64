"""Shared payload fixtures for the view-model tests.

Payloads mirror what the backend API returns, including the older shapes
(string team names, flat fixtures, number-or-object ranking scores).
"""
import json

import pytest

from kickoff.models.insights import TeamSummary


@pytest.fixture
def wire_fixture() -> dict:
    """A bare fixture in the current API shape."""
    return {
        "matchId": 1001,
        "utcDate": "2024-03-09T17:30:00Z",
        "status": "FINISHED",
        "matchday": 27,
        "competition": {"code": "PL", "name": "Premier League"},
        "homeTeam": {"id": 57, "name": "Arsenal", "tla": "ARS"},
        "awayTeam": {"id": 61, "name": "Chelsea", "tla": "CHE"},
        "score": {"home": 2, "away": 1},
    }


@pytest.fixture
def home_summary_raw() -> dict:
    return {
        "teamId": 57,
        "teamName": "Arsenal",
        "matchesPlayed": 5,
        "wins": 4,
        "draws": 0,
        "losses": 1,
        "points": 12,
        "goalsFor": 11,
        "goalsAgainst": 4,
        "avgGoalsFor": 2.2,
        "avgGoalsAgainst": 0.8,
        "bttsRate": 0.5,
        "over25Rate": 0.75,
        "cleanSheetRate": 0.5,
        "formString": "WWLWW",
    }


@pytest.fixture
def away_summary_raw() -> dict:
    return {
        "teamId": 61,
        "teamName": "Chelsea",
        "matchesPlayed": 5,
        "wins": 1,
        "draws": 0,
        "losses": 4,
        "points": 3,
        "goalsFor": 5,
        "goalsAgainst": 10,
        "avgGoalsFor": 1.0,
        "avgGoalsAgainst": 2.0,
        "bttsRate": 0.25,
        "over25Rate": 0.25,
        "cleanSheetRate": 0.0,
        "formString": "LLWLL",
    }


@pytest.fixture
def home_summary(home_summary_raw) -> TeamSummary:
    return TeamSummary.model_validate(home_summary_raw)


@pytest.fixture
def away_summary(away_summary_raw) -> TeamSummary:
    return TeamSummary.model_validate(away_summary_raw)


@pytest.fixture
def insight_card_raw(wire_fixture, home_summary_raw, away_summary_raw) -> dict:
    """A spotlight card without precomputed scores."""
    return {
        "fixture": wire_fixture,
        "homeSummary": home_summary_raw,
        "awaySummary": away_summary_raw,
        "tags": ["Form gap", "Goals likely"],
    }


@pytest.fixture
def rankings_raw() -> dict:
    return {
        "highGoals": [
            {"fixture": {"matchId": 1, "homeTeam": "Arsenal", "awayTeam": "Chelsea",
                         "utcDate": "2024-03-09T17:30:00Z"}, "score": 0.73},
            {"fixture": {"matchId": 2, "homeTeam": {"id": 65, "name": "Man City"},
                         "awayTeam": {"id": 64, "name": "Liverpool"}},
             "score": {"over25Score": 0.66}},
            {"fixture": {"homeTeam": "Nobody", "awayTeam": "Nowhere"}, "score": 0.99},
        ],
        "highBTTS": [
            {"fixture": {"matchId": 3, "homeTeam": "Spurs", "awayTeam": "Villa"},
             "score": {"bttsScore": 0.6}},
            {"fixture": {"matchId": 4, "homeTeam": "Everton", "awayTeam": "Wolves"},
             "score": {}},
        ],
        "mismatch": [],
    }


@pytest.fixture
def write_payload(tmp_path):
    """Write a JSON payload into the test's temp dir and return its path."""
    def _write(name: str, payload) -> str:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    return _write
