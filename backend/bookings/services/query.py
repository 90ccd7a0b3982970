import math
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

BOOKING_SEARCH_FIELDS = (
    ("bookingCode",),
    ("passengerEmail",),
    ("route",),
    ("tripDetails", "tripName"),
    ("tripDetails", "bus"),
)

TRIP_SEARCH_FIELDS = (
    ("tripName",),
    ("pickup", "city"),
    ("dropoff", "city"),
)

TAB_ALL = "all"
TAB_UPCOMING = "upcoming"
TAB_PAST = "past"
TABS = (TAB_ALL, TAB_UPCOMING, TAB_PAST)

EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


def _lookup(record, path):
    value = record
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _matches(record, fields, term):
    for path in fields:
        value = _lookup(record, path)
        if value is not None and not isinstance(value, dict) and term in str(value).lower():
            return True
    return False


def search_records(records, term, fields):
    if not term:
        return records
    term = term.lower()
    return [record for record in records if _matches(record, fields, term)]


def search_bookings(records, term):
    """Case-insensitive substring search over code, email, route, trip name and bus."""
    return search_records(records, term, BOOKING_SEARCH_FIELDS)


def search_trips(trips, term):
    return search_records(trips, term, TRIP_SEARCH_FIELDS)


def total_pages(count, page_size):
    return math.ceil(count / page_size)


def clamp_page(page, pages):
    return max(1, min(page, max(pages, 1)))


def paginate(records, page, page_size):
    # page must already be clamped to [1, total_pages]
    start = (page - 1) * page_size
    return records[start:page * page_size]


@dataclass
class ViewQuery:
    """Search term and current page of one list screen."""

    term: str = ""
    page: int = 1

    def set_term(self, term):
        term = term or ""
        if term != self.term:
            self.term = term
            self.page = 1
        return self

    def go_to(self, page):
        self.page = page
        return self

    def apply(self, term, page):
        """Move to ``page`` unless the search term changed, which restarts at page 1."""
        if (term or "") != self.term:
            return self.set_term(term)
        return self.go_to(page)

    def as_dict(self):
        return {"term": self.term, "page": self.page}


def parse_instant(value):
    """Parse a date or datetime string into an aware datetime, or None."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = parse_datetime(value)
        if parsed is None:
            day = parse_date(value)
            if day is None:
                return None
            parsed = datetime.combine(day, datetime.min.time())
    except ValueError:
        return None
    if timezone.is_naive(parsed):
        parsed = parsed.replace(tzinfo=dt_timezone.utc)
    return parsed


def filter_user_bookings(bookings, tab, now):
    """Filter a passenger's bookings by trip date and sort them newest first."""
    selected = []
    for booking in bookings:
        trip_date = parse_instant(_lookup(booking, ("trip", "takeoff", "date")))
        if trip_date is None:
            continue
        if tab == TAB_UPCOMING and not trip_date > now:
            continue
        if tab == TAB_PAST and not trip_date <= now:
            continue
        selected.append(booking)

    return sorted(
        selected,
        key=lambda booking: parse_instant(booking.get("createdAt")) or EPOCH,
        reverse=True,
    )
