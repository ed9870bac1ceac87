# services/tracking.py
import random

TRACKING_PREFIX = "CRG"


def generate_tracking_number():
    """CRG followed by 7 random digits, e.g. CRG4821937."""
    return f"{TRACKING_PREFIX}{random.randint(1000000, 9999999)}"
