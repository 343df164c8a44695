"""UTC time helpers and calendar-period arithmetic."""

from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def month_label(moment: datetime | date) -> str:
    """Return the ``YYYY-MM`` label of the month containing *moment*."""
    return f"{moment.year:04d}-{moment.month:02d}"


def previous_calendar_month(now: datetime) -> tuple[str, date]:
    """Return the label and last day of the month before *now* (UTC).

    >>> previous_calendar_month(datetime(2024, 3, 1, tzinfo=timezone.utc))
    ('2024-02', datetime.date(2024, 2, 29))
    """
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    first_of_month = date(now.year, now.month, 1)
    last_of_previous = first_of_month - timedelta(days=1)
    return month_label(last_of_previous), last_of_previous
