import re
from datetime import datetime, time

from django.utils.dateparse import parse_date

TAKEOFF_TIME_RE = re.compile(r"(\d+):(\d+)\s?(AM|PM)", re.IGNORECASE)

SCHEDULED = "scheduled"
FINISHED = "finished"

RECENT_BOOKINGS_LIMIT = 5


def parse_takeoff_date(value):
    """Return the calendar date of a takeoff value such as 2025-01-10 or 2025-01-10T00:00:00Z."""
    if not value or not isinstance(value, str):
        return None
    try:
        return parse_date(value.strip().split("T")[0])
    except ValueError:
        return None


def parse_takeoff_time(value):
    """Parse a 12-hour clock string ("8:00 AM", "2:30pm") into a time of day.

    Returns None when the string does not carry a meridiem or names an
    impossible clock time; callers then fall back to midnight.
    """
    if not value or not isinstance(value, str):
        return None
    match = TAKEOFF_TIME_RE.search(value)
    if not match:
        return None

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3).upper()
    if period == "PM" and hours < 12:
        hours += 12
    if period == "AM" and hours == 12:
        hours = 0

    try:
        return time(hours, minutes)
    except ValueError:
        return None


def parse_takeoff(takeoff):
    if not isinstance(takeoff, dict) or not takeoff.get("date"):
        return None
    takeoff_date = parse_takeoff_date(takeoff.get("date"))
    if takeoff_date is None:
        return None
    return datetime.combine(takeoff_date, parse_takeoff_time(takeoff.get("time")) or time())


def derive_status(takeoff_at, now):
    if takeoff_at is None:
        return FINISHED
    if takeoff_at.tzinfo is None and now.tzinfo is not None:
        takeoff_at = takeoff_at.replace(tzinfo=now.tzinfo)
    return SCHEDULED if takeoff_at > now else FINISHED


def _location(value):
    return {"city": value.get("city"), "location": value.get("location")}


def _normalize_trip_details(trip):
    takeoff = trip.get("takeoff") or {}
    return {
        "tripName": trip.get("tripName") or "Unknown Trip",
        "tripId": trip.get("tripId") or "N/A",
        "bus": trip.get("bus") or "N/A",
        "pickup": _location(trip["pickup"]),
        "dropoff": _location(trip["dropoff"]),
        "takeoff": {"date": takeoff.get("date"), "time": takeoff.get("time")},
        "departureTime": trip.get("departureTime"),
        "arrivalTime": trip.get("arrivalTime"),
        "price": trip.get("price"),
    }


def normalize_bookings(raw_records, now):
    """Collapse seat-level booking rows into one booking per booking code.

    The first row seen for a code is the representative; later seats of the
    same booking are dropped. The result lists the most recently seen code
    first. ``now`` is shared by every record of the pass.
    """
    by_code = {}

    for record in raw_records:
        code = record.get("bookingCode")
        if code in by_code:
            continue

        trip = record["tripDetails"]
        by_code[code] = {
            "bookingCode": code,
            "passengerEmail": record.get("passengerEmail"),
            "route": record.get("route"),
            "seatId": record.get("seatId"),
            "seatPosition": record.get("seatPosition"),
            "amount": record.get("amount"),
            "status": derive_status(parse_takeoff(trip.get("takeoff")), now),
            "date": record.get("date"),
            "tripDetails": _normalize_trip_details(trip),
        }

    return list(reversed(by_code.values()))


def summarize_bookings(bookings):
    scheduled = sum(1 for booking in bookings if booking.get("status") == SCHEDULED)
    finished = sum(1 for booking in bookings if booking.get("status") == FINISHED)
    revenue = sum(booking.get("amount") or 0 for booking in bookings)

    return {
        "totalBookings": len(bookings),
        "scheduledBookings": scheduled,
        "finishedBookings": finished,
        "totalRevenue": revenue,
        "recentBookings": bookings[:RECENT_BOOKINGS_LIMIT],
    }
