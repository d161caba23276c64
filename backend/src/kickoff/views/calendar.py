"""Group fixtures into calendar days of a display timezone.

Day keys come from a full IANA timezone conversion, not a fixed offset, so
daylight-saving transitions land fixtures on the right local day.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Iterable
from zoneinfo import ZoneInfo

from kickoff.models.fixtures import CanonicalFixture, DateBucket, parse_utc_date

logger = logging.getLogger(__name__)

UPCOMING_RANGES = ("today", "tomorrow", "weekend", "next7")


def to_local(utc_date: str | datetime, tz: str) -> datetime:
    """Convert an ISO-8601 string or datetime to the given timezone."""
    if isinstance(utc_date, datetime):
        dt = utc_date if utc_date.tzinfo else utc_date.replace(tzinfo=timezone.utc)
    else:
        dt = parse_utc_date(utc_date)
        if dt is None:
            raise ValueError(f"Unparseable timestamp: {utc_date!r}")
    return dt.astimezone(ZoneInfo(tz))


def local_date_key(utc_date: str | datetime, tz: str) -> str:
    """YYYY-MM-DD of the instant as seen in ``tz``."""
    return to_local(utc_date, tz).date().isoformat()


def bucket_by_local_date(fixtures: Iterable[CanonicalFixture], tz: str) -> list[DateBucket]:
    """Group fixtures by local calendar day, both levels in ascending order.

    Within a day fixtures are ordered by kickoff instant, then matchId.
    """
    zone = ZoneInfo(tz)
    grouped: dict[str, list[tuple[datetime, CanonicalFixture]]] = defaultdict(list)
    for fixture in fixtures:
        kickoff = fixture.kickoff_at
        grouped[kickoff.astimezone(zone).date().isoformat()].append((kickoff, fixture))

    buckets = [
        DateBucket(
            date_key=key,
            fixtures=tuple(f for _, f in sorted(grouped[key], key=lambda p: (p[0], p[1].match_id))),
        )
        for key in sorted(grouped)
    ]
    logger.debug(f"Bucketed fixtures into {len(buckets)} day(s) for {tz}")
    return buckets


def today_key(tz: str, now: datetime | None = None) -> str:
    """Today's date in ``tz`` as YYYY-MM-DD."""
    now = now or datetime.now(timezone.utc)
    return local_date_key(now, tz)


def resolve_range(range_name: str, tz: str, now: datetime | None = None) -> tuple[str, str]:
    """Inclusive (date_from, date_to) day keys for an upcoming-matches range.

    - ``today`` / ``tomorrow``: a single day.
    - ``weekend``: the coming Saturday and Sunday; on a Sunday, just today.
    - ``next7``: today plus the following six days.
    """
    today = date.fromisoformat(today_key(tz, now))
    if range_name == "today":
        start = end = today
    elif range_name == "tomorrow":
        start = end = today + timedelta(days=1)
    elif range_name == "weekend":
        weekday = today.weekday()  # Mon=0 .. Sun=6
        if weekday == 6:
            start = end = today
        else:
            start = today + timedelta(days=max(5 - weekday, 0))
            end = start + timedelta(days=6 - start.weekday())
    elif range_name == "next7":
        start, end = today, today + timedelta(days=6)
    else:
        raise ValueError(f"Unknown range {range_name!r}, expected one of {UPCOMING_RANGES}")
    return start.isoformat(), end.isoformat()
