from django.utils import dateformat, timezone

from bookings.services.query import parse_instant

PLACEHOLDER = "N/A"

# "Jan 9, 2025, 10:15 AM"
DATETIME_FORMAT = "M j, Y, g:i A"
SHORT_DATETIME_FORMAT = "M j, g:i A"


def safe_format(value, fmt=DATETIME_FORMAT):
    """Format an ISO date string for display, or return the placeholder."""
    instant = parse_instant(value)
    if instant is None:
        return PLACEHOLDER
    return dateformat.format(timezone.localtime(instant), fmt)


def safe_text(value, fallback="—"):
    if isinstance(value, str) and value.strip():
        return value
    return fallback
