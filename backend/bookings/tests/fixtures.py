from unittest.mock import Mock


def trip_details(**overrides):
    details = {
        "tripName": "Lagos Express",
        "tripId": "trip-1",
        "bus": "Coaster 12",
        "pickup": {"city": "Lagos", "location": "Jibowu Terminal"},
        "dropoff": {"city": "Abuja", "location": "Utako Park"},
        "takeoff": {"date": "2099-01-10", "time": "8:00 AM"},
        "departureTime": "8:00 AM",
        "arrivalTime": "6:00 PM",
        "price": 15000,
    }
    details.update(overrides)
    return details


def raw_booking(code, seat_position=1, **overrides):
    record = {
        "bookingCode": code,
        "passengerEmail": "jane@example.com",
        "route": "Lagos - Abuja",
        "seatId": f"seat-{code}-{seat_position}",
        "seatPosition": seat_position,
        "amount": 15000,
        "date": "2025-01-09T10:15:00.000Z",
        "tripDetails": trip_details(),
    }
    record.update(overrides)
    return record


def trip(trip_id="trip-1", **overrides):
    data = {
        "_id": trip_id,
        "tripName": "Lagos Express",
        "pickup": {"city": "Lagos", "location": "Jibowu Terminal"},
        "dropoff": {"city": "Abuja", "location": "Utako Park"},
        "takeoff": {"date": "2099-01-10", "time": "8:00 AM"},
        "price": 15000,
        "seats": [
            {"_id": "seat-3", "position": 3, "isBooked": False},
            {"_id": "seat-1", "position": 1, "isBooked": True},
            {"_id": "seat-2", "position": 2, "isBooked": False},
        ],
    }
    data.update(overrides)
    return data


def user_booking(code, takeoff_date, created_at, **overrides):
    booking = {
        "bookingCode": code,
        "amount": 15000,
        "paymentReference": f"ref-{code}",
        "position": 1,
        "seat": {"_id": f"seat-{code}", "position": 1},
        "trip": trip(takeoff={"date": takeoff_date, "time": "8:00 AM"}),
        "createdAt": created_at,
    }
    booking.update(overrides)
    return booking


def api_response(body, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = body
    response.text = str(body)
    return response
