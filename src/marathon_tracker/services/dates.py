"""Date helpers shared by the aggregators."""

from datetime import date, datetime, timedelta

from marathon_tracker.domain.errors import ComputationError


def parse_instant(value: str | date | datetime) -> datetime:
    """Parse an ISO date or timestamp, raising ComputationError if malformed."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise ComputationError(f"Expected an ISO date, got {type(value).__name__}")
    try:
        return datetime.fromisoformat(value.strip()).replace(tzinfo=None)
    except ValueError as exc:
        raise ComputationError(f"Malformed date: {value!r}") from exc


def parse_day(value: str | date | datetime) -> date:
    """Parse the calendar day of an ISO date or timestamp."""
    if isinstance(value, str):
        return parse_instant(value.split("T")[0]).date()
    return parse_instant(value).date()


def week_start(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def week_dates(start: date) -> list[date]:
    """Return the seven consecutive dates starting at ``start``."""
    return [start + timedelta(days=offset) for offset in range(7)]
