# services/validity.py
from utils.dates import add_months, to_datetime
from utils.errors import BadRequestError

PASS_DURATION_MONTHS = {
    "monthly": 1,
    "quarterly": 3,
    "biannual": 6,
    "annual": 12,
}


def calculate_end_date(start_date, pass_type):
    """Return the day a pass of ``pass_type`` starting at ``start_date`` ends.

    ``start_date`` may be a datetime, a date, a BSON Timestamp or an ISO
    string. Anything else is rejected instead of defaulting to now.
    """
    pass_type = pass_type or "monthly"
    if pass_type not in PASS_DURATION_MONTHS:
        raise BadRequestError(f"Invalid pass type. Must be one of: {', '.join(PASS_DURATION_MONTHS)}")
    if start_date is None:
        raise BadRequestError("Start date is required")

    start = to_datetime(start_date, field="start date")
    return add_months(start, PASS_DURATION_MONTHS[pass_type])
