"""Day key derivation.

Every conversion from a UTC timestamp to a local calendar date goes through
``day_key`` so that all engines agree on day boundaries.
"""

from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

DECEMBER = 12


def day_key(moment: datetime, timezone_name: str) -> str:
    """Return the ``YYYY-MM-DD`` key of a timestamp in the user's timezone.

    Naive datetimes are treated as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(ZoneInfo(timezone_name)).date().isoformat()


def hour_of_day(moment: datetime, timezone_name: str) -> int:
    """Return the local hour (0-23) of a timestamp."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(ZoneInfo(timezone_name)).hour


def parse_day_key(key: str) -> date:
    return date.fromisoformat(key)


def shift_day_key(key: str, days: int) -> str:
    return (parse_day_key(key) + timedelta(days=days)).isoformat()


def day_keys_between(start_key: str, end_key: str) -> list[str]:
    """Return every day key from start to end inclusive, oldest first."""
    start = parse_day_key(start_key)
    count = (parse_day_key(end_key) - start).days + 1
    return [(start + timedelta(days=offset)).isoformat() for offset in range(count)]


def trailing_day_keys(end_key: str, count: int) -> list[str]:
    """Return ``count`` day keys ending at ``end_key``, oldest first."""
    if count <= 0:
        return []
    return day_keys_between(shift_day_key(end_key, -(count - 1)), end_key)


def month_day_keys(year: int, month: int) -> list[str]:
    """Return the day keys of a calendar month."""
    first = date(year, month, 1)
    if month == DECEMBER:
        following = date(year + 1, 1, 1)
    else:
        following = date(year, month + 1, 1)
    last = following - timedelta(days=1)
    return day_keys_between(first.isoformat(), last.isoformat())


def local_day_bounds(
    start_key: str, end_key: str, timezone_name: str
) -> tuple[datetime, datetime]:
    """Return the UTC instants covering local days start..end.

    The end bound is exclusive: local midnight after ``end_key``.
    """
    tz = ZoneInfo(timezone_name)
    start = datetime.combine(parse_day_key(start_key), time.min, tzinfo=tz)
    end = datetime.combine(
        parse_day_key(end_key) + timedelta(days=1), time.min, tzinfo=tz
    )
    return start.astimezone(UTC), end.astimezone(UTC)
