from django.conf import settings

from bookings.backends.base import BackendError
from bookings.backends.rest import RestBookingBackend


def get_booking_backend(token=None):
    """Return the configured booking backend, authenticated with ``token`` if given."""

    raw_name = getattr(settings, "BOOKING_BACKEND", None) or "rest"
    backend_name = str(raw_name).strip().lower()

    aliases = {
        "rest": "rest",
        "http": "rest",
        "api": "rest",
    }

    backend_name = aliases.get(backend_name, backend_name)

    if backend_name == "rest":
        return RestBookingBackend(token=token)

    raise BackendError(f"Unknown booking backend: {backend_name}", status_code=500)
