"""Headline insight metrics computed from two teams' trailing-window summaries.

Every score lies in [0, 1] and is left unrounded; rounding to two decimals
happens only when rendering. Both summaries are expected to cover the same
trailing window; that is not checked here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import polars as pl

from kickoff.models.insights import InsightScores, TeamSummary

RESULT_POINTS = {"W": 3, "D": 1, "L": 0}


def _check_window(window: int) -> None:
    if isinstance(window, bool) or not isinstance(window, int) or window < 1:
        raise ValueError(f"window must be a positive integer, got {window!r}")


def form_points(form_string: str, window: int | None = None) -> int:
    """Points (W=3, D=1, L=0) from a most-recent-first form string.

    When ``window`` is given only the first ``window`` results count.
    Letters other than W/D/L are ignored.
    """
    letters = [c for c in form_string.upper() if c in RESULT_POINTS]
    if window is not None:
        _check_window(window)
        letters = letters[:window]
    return sum(RESULT_POINTS[c] for c in letters)


def btts_score(home: TeamSummary, away: TeamSummary) -> float:
    return (home.btts_rate + away.btts_rate) / 2


def over25_score(home: TeamSummary, away: TeamSummary) -> float:
    return (home.over25_rate + away.over25_rate) / 2


def clean_sheet_score(home: TeamSummary, away: TeamSummary) -> float:
    """Average clean-sheet rate; shown on team pages, not a headline score."""
    return (home.clean_sheet_rate + away.clean_sheet_rate) / 2


def form_mismatch_score(home_points: int, away_points: int, window: int) -> float:
    """Absolute points gap over the last ``window`` matches divided by 3 * window."""
    _check_window(window)
    return abs(home_points - away_points) / (3 * window)


def compute_insight_scores(
    home: TeamSummary,
    away: TeamSummary,
    window: int,
) -> InsightScores:
    """Build the three headline scores for a fixture."""
    return InsightScores(
        btts_score=btts_score(home, away),
        over25_score=over25_score(home, away),
        form_mismatch_score=form_mismatch_score(home.points, away.points, window),
    )


# ---------------------------------------------------------------------------
# Batch scoring with polars
# ---------------------------------------------------------------------------

_SUMMARY_COLS = {
    "btts_rate": pl.Float64,
    "over25_rate": pl.Float64,
    "clean_sheet_rate": pl.Float64,
    "points": pl.Int64,
}


def summary_pairs_frame(
    pairs: Iterable[tuple[int, TeamSummary, TeamSummary]],
) -> pl.DataFrame:
    """Lay out (match_id, home, away) summary pairs as one row per fixture."""
    rows: list[dict] = []
    for match_id, home, away in pairs:
        row: dict = {"match_id": match_id}
        for side, summary in (("home", home), ("away", away)):
            for col in _SUMMARY_COLS:
                row[f"{side}_{col}"] = getattr(summary, col)
        rows.append(row)

    schema = {"match_id": pl.Int64}
    for side in ("home", "away"):
        for col, dtype in _SUMMARY_COLS.items():
            schema[f"{side}_{col}"] = dtype
    return pl.DataFrame(rows, schema=schema)


def score_frame(frame: pl.DataFrame, window: int) -> pl.DataFrame:
    """Append the four metric columns to a frame of home/away summary columns.

    Uses the same arithmetic as the scalar functions, so values match them
    exactly.
    """
    _check_window(window)
    return frame.with_columns(
        ((pl.col("home_btts_rate") + pl.col("away_btts_rate")) / 2).alias("btts_score"),
        ((pl.col("home_over25_rate") + pl.col("away_over25_rate")) / 2).alias("over25_score"),
        (
            (pl.col("home_points") - pl.col("away_points")).abs().cast(pl.Float64)
            / (3 * window)
        ).alias("form_mismatch_score"),
        (
            (pl.col("home_clean_sheet_rate") + pl.col("away_clean_sheet_rate")) / 2
        ).alias("clean_sheet_score"),
    )


# ---------------------------------------------------------------------------
# Metric glossary
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MetricDefinition:
    label: str
    definition: str
    how_computed: str
    example: str


METRIC_DEFINITIONS: dict[str, MetricDefinition] = {
    "btts": MetricDefinition(
        label="BTTS",
        definition=(
            "Both Teams To Score. How often both teams score at least one "
            "goal in a match."
        ),
        how_computed=(
            "The share of each team's last N finished matches where both sides "
            "scored. The match BTTS score is the average of the two teams' rates."
        ),
        example=(
            "If Arsenal had BTTS in 4 of their last 5 (80%) and Chelsea in 3 of 5 "
            "(60%), the combined BTTS score is (0.8 + 0.6) / 2 = 0.70."
        ),
    ),
    "over25": MetricDefinition(
        label="Over 2.5",
        definition="The share of matches with 3 or more total goals (e.g. 2–1, 3–0, 2–2).",
        how_computed=(
            "The share of each team's last N matches that ended with total goals "
            ">= 3. The match Over 2.5 score is the average of the two teams' rates."
        ),
        example="If Team A is 3/5 and Team B is 4/5, the combined score is (0.6 + 0.8) / 2 = 0.70.",
    ),
    "form_mismatch": MetricDefinition(
        label="Form Mismatch",
        definition="How different the two teams' recent results are.",
        how_computed=(
            "Recent results become points (Win=3, Draw=1, Loss=0) over the last "
            "N matches. Form mismatch is the absolute points difference divided "
            "by 3*N, so it ranges from 0 to 1."
        ),
        example="If one team has 12 points in the last 5 and the other has 3, mismatch = |12-3| / 15 = 0.60.",
    ),
    "clean_sheet": MetricDefinition(
        label="Clean Sheet",
        definition="The share of matches in which a team did not concede.",
        how_computed=(
            "The share of each team's last N matches with zero goals conceded. "
            "The score is the average of both teams' clean sheet rates."
        ),
        example=(
            "If Team A kept 2 clean sheets in 5 games (40%) and Team B kept 3 (60%), "
            "combined = (0.4 + 0.6) / 2 = 0.50."
        ),
    ),
}
