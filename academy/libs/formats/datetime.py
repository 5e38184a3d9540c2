from datetime import datetime, timedelta, timezone


def now() -> datetime:
    """Current UTC time as a naive datetime.
    This is the single clock used for every stored timestamp in the project.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def now_tzinfo() -> datetime:
    return datetime.now(timezone.utc)


def to_utc_naive(dt: datetime | None) -> datetime | None:
    """Normalize an aware datetime to naive UTC.
    - None → None
    - aware → converted to UTC, tzinfo dropped
    - naive → assumed UTC, returned unchanged
    """
    if dt is None:
        return None
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def hours_ago(hours: int) -> datetime:
    return now() - timedelta(hours=hours)


def parse_hhmm(value: str) -> int:
    """'HH:MM' → minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)
