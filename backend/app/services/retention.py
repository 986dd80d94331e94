# app/services/retention.py

from datetime import datetime, timedelta, timezone

# Hazards older than this drop out of every read and become purgeable
ACTIVE_WINDOW = timedelta(hours=24)

# Same-type reports this close in time (and space) are duplicates
DUPLICATE_WINDOW = timedelta(minutes=5)
DUPLICATE_TOLERANCE_DEG = 0.001


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def active_cutoff(now: datetime) -> datetime:
    """
    Hazards with timestamp > cutoff are active; timestamp <= cutoff
    are expired and removed by cleanup.
    """
    return now - ACTIVE_WINDOW


def duplicate_cutoff(now: datetime, window: timedelta = DUPLICATE_WINDOW) -> datetime:
    return now - window


def as_utc(timestamp: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we store is UTC
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def age_minutes(timestamp: datetime, now: datetime) -> float:
    return (now - as_utc(timestamp)).total_seconds() / 60
