import logging

import requests
from django.conf import settings

from bookings.backends.base import BackendError, BookingBackend
from bookings.serializers import (
    CitySerializer,
    RawBookingRecordSerializer,
    TripSerializer,
    UserBookingSerializer,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15


def _build_headers(token):
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def validate_payload(serializer_class, items):
    """Reject a malformed backend collection instead of rendering partial data."""
    serializer = serializer_class(data=items, many=True)
    if not serializer.is_valid():
        logger.warning("Malformed booking service payload", extra={"errors": serializer.errors})
        raise BackendError(
            "Booking service returned malformed data.",
            status_code=502,
            details={"errors": serializer.errors},
        )
    return items


def _error_message(details, fallback):
    if isinstance(details, dict) and isinstance(details.get("message"), str) and details["message"]:
        return details["message"]
    return fallback


class RestBookingBackend(BookingBackend):
    def __init__(self, token=None, base_url=None, timeout=None):
        self.token = token
        self.base_url = (base_url or getattr(settings, "BOOKING_API_BASE_URL", "")).rstrip("/")
        self.timeout = timeout or getattr(settings, "BOOKING_API_TIMEOUT", DEFAULT_TIMEOUT)

    def _request_json(self, method, path, *, payload=None, failure_message="Booking service returned an error."):
        if not self.base_url:
            raise BackendError("Booking service URL is not configured.", status_code=500)

        url = f"{self.base_url}{path}"
        try:
            response = requests.request(
                method,
                url,
                json=payload,
                headers=_build_headers(self.token),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.exception("Booking service request failed.", extra={"path": path})
            raise BackendError(
                "Booking service request failed.",
                status_code=502,
                details={"error": str(exc)},
            )

        if response.status_code >= 400:
            try:
                details = response.json()
            except ValueError:
                details = {"error": response.text}
            logger.warning(
                "Booking service error response",
                extra={"path": path, "status_code": response.status_code, "details": details},
            )
            raise BackendError(
                _error_message(details, failure_message),
                status_code=response.status_code,
                details=details,
            )

        try:
            body = response.json()
        except ValueError:
            raise BackendError("Booking service response was not valid JSON.")

        if not isinstance(body, dict):
            raise BackendError("Booking service response was not a JSON object.")

        # 2xx with success=false is a business rejection
        if body.get("success") is False:
            logger.info("Booking service rejected request", extra={"path": path, "api_message": body.get("message")})
            raise BackendError(_error_message(body, failure_message), status_code=400, details=body)

        return body

    def _collection(self, body, key, serializer_class):
        items = body.get(key)
        if items is None:
            return []
        return validate_payload(serializer_class, items)

    def fetch_bookings(self):
        body = self._request_json("GET", "/trips/bookings", failure_message="Failed to fetch bookings")
        return self._collection(body, "bookings", RawBookingRecordSerializer)

    def fetch_user_bookings(self, user_id):
        body = self._request_json("GET", f"/pay/trips/{user_id}", failure_message="Failed to fetch bookings")
        return self._collection(body, "bookings", UserBookingSerializer)

    def fetch_all_trips(self):
        body = self._request_json("GET", "/trips/fetch-all-trips", failure_message="Failed to fetch trips")
        return self._collection(body, "trips", TripSerializer)

    def search_trips_by_id(self, ids):
        body = self._request_json(
            "POST", "/trips/search-trips-by-id", payload={"ids": ids}, failure_message="Unable to fetch trips."
        )
        return self._collection(body, "trips", TripSerializer)

    def search_trips_by_ids(self, ids):
        body = self._request_json(
            "POST", "/trips/search-trips-by-ids", payload={"ids": ids}, failure_message="Unable to fetch trips."
        )
        return self._collection(body, "trips", TripSerializer)

    def list_cities(self):
        body = self._request_json("GET", "/cities", failure_message="Failed to load cities")
        return self._collection(body, "data", CitySerializer)

    def add_city(self, city):
        return self._request_json("POST", "/cities/add", payload={"cities": [city]}, failure_message="Save failed")

    def update_city(self, city_id, city):
        return self._request_json("PUT", f"/cities/{city_id}", payload=city, failure_message="Save failed")

    def delete_city(self, city_id):
        return self._request_json("DELETE", f"/cities/{city_id}", failure_message="Delete failed")

    def create_payment(self, payload):
        return self._request_json(
            "POST", "/pay/create-paystack-payment", payload=payload, failure_message="Payment could not be started."
        )

    def verify_payment(self, payload):
        return self._request_json(
            "POST", "/pay/verify-payment", payload=payload, failure_message="Payment verification failed."
        )

    def admin_login(self, email):
        return self._request_json("POST", "/admins/login", payload={"email": email}, failure_message="Login failed")

    def admin_verify_otp(self, email, otp):
        return self._request_json(
            "POST", "/admins/verify-otp", payload={"email": email, "otp": otp}, failure_message="Invalid OTP"
        )

    def admin_resend_otp(self, email):
        return self._request_json(
            "POST", "/admins/resend-otp", payload={"email": email}, failure_message="Failed to resend OTP"
        )

    def user_send_otp(self, email):
        return self._request_json(
            "POST", "/users/send-otp", payload={"email": email}, failure_message="Failed to send OTP"
        )

    def user_verify_otp(self, email, otp):
        return self._request_json(
            "POST", "/users/verify-otp", payload={"email": email, "otp": otp}, failure_message="Invalid OTP"
        )
