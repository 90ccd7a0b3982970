from bookings.services.query import ViewQuery

ADMIN_TOKEN = "adminToken"
ADMIN_DATA = "adminData"
USER_TOKEN = "token"
USER = "user"
SELECTED_SEAT_IDS = "selectedSeatIds"
PAYMENT_REFERENCE = "paymentReference"
BOOKINGS_VIEW = "bookingsView"


class SessionContext:
    """Typed accessors over the client state kept in the Django session."""

    def __init__(self, session):
        self.session = session

    @classmethod
    def from_request(cls, request):
        return cls(request.session)

    def _set(self, key, value):
        if value is None:
            self.session.pop(key, None)
        else:
            self.session[key] = value

    @property
    def admin_token(self):
        return self.session.get(ADMIN_TOKEN)

    @admin_token.setter
    def admin_token(self, value):
        self._set(ADMIN_TOKEN, value)

    @property
    def admin_data(self):
        return self.session.get(ADMIN_DATA)

    @admin_data.setter
    def admin_data(self, value):
        self._set(ADMIN_DATA, value)

    @property
    def token(self):
        return self.session.get(USER_TOKEN)

    @token.setter
    def token(self, value):
        self._set(USER_TOKEN, value)

    @property
    def user(self):
        return self.session.get(USER)

    @user.setter
    def user(self, value):
        self._set(USER, value)

    @property
    def selected_seat_ids(self):
        return list(self.session.get(SELECTED_SEAT_IDS) or [])

    @selected_seat_ids.setter
    def selected_seat_ids(self, value):
        self._set(SELECTED_SEAT_IDS, list(value) if value is not None else None)

    @property
    def payment_reference(self):
        return self.session.get(PAYMENT_REFERENCE)

    @payment_reference.setter
    def payment_reference(self, value):
        self._set(PAYMENT_REFERENCE, value)

    @property
    def is_admin(self):
        return bool(self.admin_token)

    @property
    def user_id(self):
        user = self.user
        if isinstance(user, dict):
            return user.get("_id")
        return None

    @property
    def user_email(self):
        user = self.user
        if isinstance(user, dict):
            return user.get("email")
        return None

    def bookings_view(self):
        stored = self.session.get(BOOKINGS_VIEW) or {}
        return ViewQuery(term=stored.get("term", ""), page=stored.get("page", 1))

    def save_bookings_view(self, view):
        self.session[BOOKINGS_VIEW] = view.as_dict()

    def clear_admin(self):
        for key in (ADMIN_TOKEN, ADMIN_DATA, BOOKINGS_VIEW):
            self.session.pop(key, None)

    def clear_checkout(self):
        self.session.pop(SELECTED_SEAT_IDS, None)
