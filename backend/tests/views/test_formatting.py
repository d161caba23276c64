"""
Presentation formatter tests
"""
import pytest

from kickoff.models.fixtures import CanonicalFixture, Score, TeamRef
from kickoff.models.insights import TeamSummary
from kickoff.views.formatting import (
    PLACEHOLDER,
    form_letters,
    format_competition,
    format_date_heading,
    format_kickoff_long,
    format_kickoff_time,
    format_metric,
    format_quick_tag,
    format_score,
    teams_label,
)

NY = "America/New_York"


def _fixture(status: str, home: int | None = None, away: int | None = None, **kwargs) -> CanonicalFixture:
    return CanonicalFixture(
        match_id=1,
        utc_date=kwargs.pop("utc_date", "2024-03-10T04:30:00Z"),
        status=status,
        home_team=TeamRef(id=57, name="Arsenal"),
        away_team=TeamRef(id=61, name="Chelsea"),
        score=Score(home=home, away=away),
        **kwargs,
    )


class TestFormatScore:
    """format_score"""

    def test_scheduled_without_score(self):
        assert format_score(_fixture("SCHEDULED")) == "—"

    def test_finished(self):
        assert format_score(_fixture("FINISHED", 2, 1)) == "2–1"

    @pytest.mark.parametrize("status", ["LIVE", "IN_PLAY"])
    def test_live(self, status):
        assert format_score(_fixture(status, 0, 0)) == "0–0"

    def test_finished_with_null_score_is_placeholder(self):
        assert format_score(_fixture("FINISHED")) == PLACEHOLDER
        assert format_score(_fixture("FINISHED", 1, None)) == PLACEHOLDER

    @pytest.mark.parametrize("status", ["SCHEDULED", "POSTPONED", "TIMED"])
    def test_score_ignored_for_unplayed_statuses(self, status):
        assert format_score(_fixture(status, 0, 0)) == PLACEHOLDER


class TestKickoffStrings:
    """Kickoff time and date headings"""

    def test_kickoff_time(self):
        assert format_kickoff_time(_fixture("SCHEDULED"), NY) == "11:30 PM"

    def test_kickoff_time_from_string(self):
        assert format_kickoff_time("2024-03-09T17:00:00Z", NY) == "12:00 PM"
        assert format_kickoff_time("2024-03-09T05:05:00Z", NY) == "12:05 AM"

    def test_kickoff_long(self):
        assert format_kickoff_long(_fixture("SCHEDULED"), NY) == "Sat, Mar 9, 11:30 PM"

    def test_date_heading(self):
        assert format_date_heading("2024-03-09") == "Saturday, March 9"


class TestSmallFormatters:
    """Metric, tag, label helpers"""

    def test_metric_rounds_at_render(self):
        assert format_metric(0.756) == "0.76"
        assert format_metric(0.6) == "0.60"
        assert format_metric(1 / 3) == "0.33"

    def test_metric_missing(self):
        assert format_metric(None) == PLACEHOLDER
        assert format_metric(None, missing="N/A") == "N/A"

    def test_quick_tag(self):
        assert format_quick_tag(_fixture("SCHEDULED")) == PLACEHOLDER
        assert format_quick_tag(_fixture("SCHEDULED", quick_tag="Derby")) == "Derby"

    def test_competition_fallback(self):
        assert format_competition(_fixture("SCHEDULED")) == "Unknown Competition"
        assert format_competition(_fixture("SCHEDULED", competition_name="FA Cup")) == "FA Cup"

    def test_teams_label(self):
        assert teams_label(_fixture("SCHEDULED")) == "Arsenal vs Chelsea"

    def test_form_letters(self):
        assert form_letters(TeamSummary(form_string="WDL")) == ["W", "D", "L"]
        assert form_letters(None) == []
