class BackendError(Exception):
    def __init__(self, message, status_code=502, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or {}


class BookingBackend:
    """Remote booking service. Every method returns the decoded response body."""

    def fetch_bookings(self):
        raise NotImplementedError

    def fetch_user_bookings(self, user_id):
        raise NotImplementedError

    def fetch_all_trips(self):
        raise NotImplementedError

    def search_trips_by_id(self, ids):
        raise NotImplementedError

    def search_trips_by_ids(self, ids):
        raise NotImplementedError

    def list_cities(self):
        raise NotImplementedError

    def add_city(self, city):
        raise NotImplementedError

    def update_city(self, city_id, city):
        raise NotImplementedError

    def delete_city(self, city_id):
        raise NotImplementedError

    def create_payment(self, payload):
        raise NotImplementedError

    def verify_payment(self, payload):
        raise NotImplementedError

    def admin_login(self, email):
        raise NotImplementedError

    def admin_verify_otp(self, email, otp):
        raise NotImplementedError

    def admin_resend_otp(self, email):
        raise NotImplementedError

    def user_send_otp(self, email):
        raise NotImplementedError

    def user_verify_otp(self, email, otp):
        raise NotImplementedError
