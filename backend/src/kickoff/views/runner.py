"""CLI for inspecting fetched dashboard payloads.

Usage:
    python -m kickoff.views.runner fixtures upcoming.json --tz America/New_York
    python -m kickoff.views.runner scores dashboard.json --window 5 --out scores.csv
    python -m kickoff.views.runner rankings dashboard.json --limit 5
    python -m kickoff.views.runner preview preview.json
    python -m kickoff.views.runner team team.json
    python -m kickoff.views.runner explain form_mismatch
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import polars as pl
import typer
from rich.console import Console
from rich.table import Table

from kickoff.config import get_settings
from kickoff.models.fixtures import RankingItem
from kickoff.models.insights import TeamSummary
from kickoff.payloads import read_json, write_json
from kickoff.views.calendar import bucket_by_local_date
from kickoff.views.formatting import (
    format_competition,
    format_date_heading,
    format_kickoff_long,
    format_kickoff_time,
    format_metric,
    format_quick_tag,
    format_score,
    teams_label,
)
from kickoff.views.metrics import METRIC_DEFINITIONS, clean_sheet_score, score_frame, summary_pairs_frame
from kickoff.views.normalize import (
    normalize_fixtures,
    normalize_insight_cards,
    normalize_rankings,
    parse_match_preview,
    parse_team_insights,
)

app = typer.Typer(help="Kickoff insights view-model CLI")
console = Console()
logger = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _load(path: Path) -> Any:
    try:
        return read_json(path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Could not read payload {path}: {e}[/red]")
        raise typer.Exit(1)


def _items(payload: Any, *keys: str) -> Any:
    """A bare list, or the first of ``keys`` present on a page payload."""
    if isinstance(payload, dict):
        for key in keys:
            if key in payload:
                return payload[key]
        return []
    return payload


def _resolve_window(window: Optional[int], default: int) -> int:
    window = window if window is not None else default
    if window < 1:
        console.print(f"[red]Window must be positive, got {window}[/red]")
        raise typer.Exit(1)
    return window


@app.command()
def fixtures(
    path: Path = typer.Argument(..., help="JSON file: fixture list, upcoming or dashboard payload"),
    tz: Optional[str] = typer.Option(None, "--tz", help="Display timezone (default from settings)"),
    out: Optional[Path] = typer.Option(None, "--out", help="Write day buckets as JSON"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Normalize fixtures and list them by local calendar day."""
    settings = get_settings()
    _setup_logging(log_level or settings.log_level)
    tz = tz or settings.display_timezone

    raw = _items(_load(path), "fixtures", "fixturesTable")
    rows = normalize_fixtures(raw)
    total = len(raw) if isinstance(raw, list) else 0
    logger.info(f"Normalized {len(rows)} of {total} fixture records")

    buckets = bucket_by_local_date(rows, tz)
    if not buckets:
        console.print("[yellow]No fixtures found for this period.[/yellow]")

    for bucket in buckets:
        table = Table(title=format_date_heading(bucket.date_key))
        table.add_column("Time")
        table.add_column("Match")
        table.add_column("Competition")
        table.add_column("Status")
        table.add_column("Score", justify="center")
        table.add_column("Quick Tag")
        for f in bucket.fixtures:
            table.add_row(
                format_kickoff_time(f, tz),
                teams_label(f),
                format_competition(f),
                f.status,
                format_score(f),
                format_quick_tag(f),
            )
        console.print(table)

    if total > len(rows):
        console.print(f"[yellow]⚠ {total - len(rows)} malformed record(s) skipped.[/yellow]")
    if out is not None:
        console.print(f"[green]✓ Wrote {write_json(out, buckets)}[/green]")


@app.command()
def scores(
    path: Path = typer.Argument(..., help="JSON file: insight card list, upcoming or dashboard payload"),
    window: Optional[int] = typer.Option(None, "--window", help="Trailing window N of the summaries"),
    out: Optional[Path] = typer.Option(None, "--out", help="Write the score table as CSV"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Recompute insight scores from the team summaries on each card."""
    settings = get_settings()
    _setup_logging(log_level or settings.log_level)
    window = _resolve_window(window, settings.form_window)

    cards = normalize_insight_cards(_items(_load(path), "spotlight", "cards"), window)
    scored = [c for c in cards if c.home_summary is not None and c.away_summary is not None]
    skipped = len(cards) - len(scored)

    frame = score_frame(
        summary_pairs_frame(
            (c.fixture.match_id, c.home_summary, c.away_summary) for c in scored
        ),
        window,
    ).with_columns(pl.Series("match", [teams_label(c.fixture) for c in scored], dtype=pl.Utf8))
    frame = frame.select(
        "match_id", "match", "btts_score", "over25_score", "form_mismatch_score", "clean_sheet_score",
    )

    table = Table(title=f"Insight Scores (last {window})")
    table.add_column("Match")
    table.add_column("BTTS", justify="right")
    table.add_column("Over 2.5", justify="right")
    table.add_column("Mismatch", justify="right")
    table.add_column("Clean Sheet", justify="right")
    for row in frame.iter_rows(named=True):
        table.add_row(
            row["match"],
            format_metric(row["btts_score"]),
            format_metric(row["over25_score"]),
            format_metric(row["form_mismatch_score"]),
            format_metric(row["clean_sheet_score"]),
        )
    console.print(table)

    if skipped:
        console.print(f"[yellow]⚠ {skipped} card(s) without both team summaries skipped.[/yellow]")
    if out is not None:
        frame.write_csv(out)
        console.print(f"[green]✓ Wrote {out}[/green]")


def _ranking_table(title: str, items: tuple[RankingItem, ...], tz: str) -> Table:
    table = Table(title=title)
    table.add_column("Match")
    table.add_column("Kickoff")
    table.add_column("Score", justify="right")
    for item in items:
        kickoff = format_kickoff_time(item.fixture.utc_date, tz) if item.fixture.utc_date else ""
        table.add_row(teams_label(item.fixture), kickoff, format_metric(item.score, missing="N/A"))
    if not items:
        table.add_row("No items", "", "")
    return table


@app.command()
def rankings(
    path: Path = typer.Argument(..., help="JSON file: rankings or dashboard payload"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Rows per leaderboard"),
    tz: Optional[str] = typer.Option(None, "--tz", help="Display timezone"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Print the high-goals, high-BTTS and mismatch leaderboards."""
    settings = get_settings()
    _setup_logging(log_level or settings.log_level)
    tz = tz or settings.display_timezone
    limit = limit if limit is not None else settings.rankings_limit
    if limit < 0:
        console.print(f"[red]Limit must not be negative, got {limit}[/red]")
        raise typer.Exit(1)

    payload = _load(path)
    if isinstance(payload, dict) and "rankings" in payload:
        payload = payload["rankings"]
    boards = normalize_rankings(payload, limit)

    console.print(_ranking_table("High Goals", boards.high_goals, tz))
    console.print(_ranking_table("High BTTS", boards.high_btts, tz))
    console.print(_ranking_table("Form Mismatch", boards.mismatch, tz))


def _summary_table(title: str, summaries: list[tuple[str, TeamSummary | None]]) -> Table:
    table = Table(title=title)
    table.add_column("Team")
    table.add_column("P", justify="right")
    table.add_column("W-D-L", justify="center")
    table.add_column("Pts", justify="right")
    table.add_column("GF:GA", justify="center")
    table.add_column("BTTS", justify="right")
    table.add_column("O2.5", justify="right")
    table.add_column("CS", justify="right")
    table.add_column("Form")
    for name, s in summaries:
        if s is None:
            table.add_row(name, "", "", "", "", "", "", "", "No form data")
            continue
        table.add_row(
            name,
            str(s.matches_played),
            f"{s.wins}-{s.draws}-{s.losses}",
            str(s.points),
            f"{s.goals_for}:{s.goals_against}",
            format_metric(s.btts_rate),
            format_metric(s.over25_rate),
            format_metric(s.clean_sheet_rate),
            s.form_string or "No form data",
        )
    return table


@app.command()
def preview(
    path: Path = typer.Argument(..., help="JSON file: match preview payload"),
    window: Optional[int] = typer.Option(None, "--window", help="Trailing window N of the summaries"),
    tz: Optional[str] = typer.Option(None, "--tz", help="Display timezone"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Print a match preview: header, scores, form comparison."""
    settings = get_settings()
    _setup_logging(log_level or settings.log_level)
    tz = tz or settings.display_timezone
    window = _resolve_window(window, settings.form_window)

    view = parse_match_preview(_load(path), window)
    if view is None:
        console.print("[red]Match not found in payload.[/red]")
        raise typer.Exit(1)

    match = view.match
    console.print(f"[bold]{format_competition(match)}[/bold]")
    console.print(f"{teams_label(match)}  {format_score(match)}")
    console.print(f"{format_kickoff_long(match, tz)}  [{match.status}]")
    if view.tags:
        console.print("Tags: " + ", ".join(view.tags))

    if view.scores is not None:
        console.print(
            f"BTTS {format_metric(view.scores.btts_score)}  "
            f"Over 2.5 {format_metric(view.scores.over25_score)}  "
            f"Mismatch {format_metric(view.scores.form_mismatch_score)}"
        )
    for bullet in view.why_bullets:
        console.print(f"  • {bullet}")

    console.print(_summary_table(
        "Form Comparison",
        [(view.home.team.name, view.home.summary), (view.away.team.name, view.away.summary)],
    ))
    if view.home.summary is not None and view.away.summary is not None:
        cs = clean_sheet_score(view.home.summary, view.away.summary)
        console.print(f"Clean Sheet {format_metric(cs)}")


@app.command()
def team(
    path: Path = typer.Argument(..., help="JSON file: team insights payload"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Print a team's summary and recent matches."""
    settings = get_settings()
    _setup_logging(log_level or settings.log_level)

    view = parse_team_insights(_load(path))
    if view is None:
        console.print("[red]Team not found in payload.[/red]")
        raise typer.Exit(1)

    console.print(_summary_table(view.team.name, [(view.team.name, view.summary)]))

    if view.recent_matches:
        table = Table(title="Recent Matches")
        table.add_column("Date")
        table.add_column("Opponent")
        table.add_column("H/A", justify="center")
        table.add_column("Score", justify="center")
        table.add_column("Result", justify="center")
        for m in view.recent_matches:
            table.add_row(
                m.date, m.opponent_name, m.home_away[0],
                f"{m.score_for}-{m.score_against}", m.result,
            )
        console.print(table)

    if view.upcoming_fixture_ids:
        console.print("Upcoming: " + ", ".join(f"#{i}" for i in view.upcoming_fixture_ids))


@app.command()
def explain(
    metric: Optional[str] = typer.Argument(None, help="btts, over25, form_mismatch or clean_sheet"),
) -> None:
    """Describe how each metric is defined and computed."""
    if metric is not None and metric not in METRIC_DEFINITIONS:
        console.print(
            f"[red]Unknown metric: {metric}. Available: {', '.join(METRIC_DEFINITIONS)}[/red]"
        )
        raise typer.Exit(1)

    keys = [metric] if metric else list(METRIC_DEFINITIONS)
    for key in keys:
        d = METRIC_DEFINITIONS[key]
        console.print(f"[bold]{d.label}[/bold]")
        console.print(d.definition)
        console.print(f"[dim]How it's calculated:[/dim] {d.how_computed}")
        console.print(f"[dim]Example:[/dim] {d.example}")
        console.print()


if __name__ == "__main__":
    app()
