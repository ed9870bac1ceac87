# utils/dates.py
import calendar
from datetime import date, datetime, time, timedelta, timezone

from bson.timestamp import Timestamp

from utils.errors import BadRequestError


def utcnow():
    """Current UTC time as a naive datetime, the way pymongo stores it."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_day(value):
    return datetime.combine(value.date() if isinstance(value, datetime) else value, time.min)


def end_of_day(value):
    return start_of_day(value) + timedelta(days=1) - timedelta(microseconds=1)


def to_datetime(value, field="date"):
    """Coerce a datetime, date, BSON Timestamp or ISO-8601 string to naive UTC."""
    if isinstance(value, Timestamp):
        value = value.as_datetime()
    elif isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise BadRequestError(f"Invalid {field}: {value!r} is not an ISO-8601 date")
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)

    if not isinstance(value, datetime):
        raise BadRequestError(f"Invalid {field}: {value!r}")
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def add_months(value, months):
    # Clamp to the last day of the target month (Jan 31 + 1 month -> Feb 28/29)
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
