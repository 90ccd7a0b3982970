import logging
from urllib.parse import urlencode

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.backends import get_booking_backend
from bookings.backends.base import BackendError
from bookings.permissions import HasAdminToken, HasUserToken
from bookings.serializers import (
    BookingQuerySerializer,
    CitySerializer,
    EmailSerializer,
    OtpVerifySerializer,
    PaymentVerifySerializer,
    SeatSelectionSerializer,
    TripIdsSerializer,
    UserTripsQuerySerializer,
)
from bookings.services.export import (
    ADMIN_REPORT_PREFIX,
    BACKUP_PREFIX,
    BOOKINGS_EXPORT_PREFIX,
    export_json,
    json_download,
)
from bookings.services.formatting import SHORT_DATETIME_FORMAT, safe_format, safe_text
from bookings.services.normalize import normalize_bookings, summarize_bookings
from bookings.services.query import (
    clamp_page,
    filter_user_bookings,
    paginate,
    search_bookings,
    search_trips,
    total_pages,
)
from bookings.session import SessionContext

logger = logging.getLogger(__name__)


def _error_response(exc):
    payload = {"message": str(exc)}
    if exc.details:
        payload["details"] = exc.details
    return Response(payload, status=exc.status_code or status.HTTP_502_BAD_GATEWAY)


def _admin_backend(request):
    return get_booking_backend(token=SessionContext.from_request(request).admin_token)


def _load_bookings(backend):
    # one "now" per pass so every record is judged against the same instant
    return normalize_bookings(backend.fetch_bookings(), timezone.localtime())


def _load_trips(backend, required=True):
    try:
        return list(reversed(backend.fetch_all_trips()))
    except BackendError as exc:
        if required:
            raise
        logger.warning("Failed to fetch trips", extra={"error": str(exc)})
        return []


def _with_booked_at(bookings, fmt=None):
    fmt = fmt or settings.BOOKING_DATETIME_FORMAT
    return [{**booking, "bookedAt": safe_format(booking.get("date"), fmt)} for booking in bookings]


class HealthView(APIView):
    def get(self, request):
        return Response({"status": "ok"})


class AdminDashboardView(APIView):
    permission_classes = [HasAdminToken]

    def get(self, request):
        backend = _admin_backend(request)
        try:
            bookings = _load_bookings(backend)
        except BackendError as exc:
            return _error_response(exc)
        trips = _load_trips(backend, required=False)

        summary = summarize_bookings(bookings)
        summary["recentBookings"] = _with_booked_at(summary["recentBookings"], SHORT_DATETIME_FORMAT)
        return Response({**summary, "totalTrips": len(trips), "trips": trips, "bookings": bookings})


class AdminDashboardExportView(APIView):
    permission_classes = [HasAdminToken]

    def get(self, request):
        backend = _admin_backend(request)
        try:
            bookings = _load_bookings(backend)
            trips = _load_trips(backend)
        except BackendError as exc:
            return _error_response(exc)

        return json_download(export_json({"bookings": bookings, "trips": trips}, ADMIN_REPORT_PREFIX))


class AdminBookingsView(APIView):
    """Bookings management: search, then paginate the normalized bookings."""

    permission_classes = [HasAdminToken]

    def get(self, request):
        query = BookingQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        context = SessionContext.from_request(request)
        view = context.bookings_view().apply(params["q"], params["page"])

        try:
            bookings = _load_bookings(_admin_backend(request))
        except BackendError as exc:
            return _error_response(exc)

        page_size = settings.BOOKINGS_PAGE_SIZE
        filtered = search_bookings(bookings, view.term)
        pages = total_pages(len(filtered), page_size)
        view.go_to(clamp_page(view.page, pages))
        context.save_bookings_view(view)

        return Response(
            {
                "query": view.term,
                "page": view.page,
                "pageSize": page_size,
                "totalPages": pages,
                "totalResults": len(filtered),
                "bookings": _with_booked_at(paginate(filtered, view.page, page_size)),
            }
        )


class AdminBookingsExportView(APIView):
    permission_classes = [HasAdminToken]

    def get(self, request):
        query = BookingQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            bookings = _load_bookings(_admin_backend(request))
        except BackendError as exc:
            return _error_response(exc)

        filtered = search_bookings(bookings, query.validated_data["q"])
        return json_download(export_json({"bookings": filtered}, BOOKINGS_EXPORT_PREFIX))


class AdminBackupView(APIView):
    permission_classes = [HasAdminToken]

    def get(self, request):
        backend = _admin_backend(request)
        try:
            trips = _load_trips(backend)
            bookings = _load_bookings(backend)
        except BackendError as exc:
            return _error_response(exc)

        return json_download(export_json({"trips": trips, "bookings": bookings}, BACKUP_PREFIX))


class AdminLogoutView(APIView):
    def post(self, request):
        SessionContext.from_request(request).clear_admin()
        return Response({"success": True})


class AdminLoginView(APIView):
    def post(self, request):
        serializer = EmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            body = get_booking_backend().admin_login(serializer.validated_data["email"])
        except BackendError as exc:
            return _error_response(exc)
        return Response({"message": body.get("message") or "OTP sent to your email!"})


class AdminResendOtpView(APIView):
    def post(self, request):
        serializer = EmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            body = get_booking_backend().admin_resend_otp(serializer.validated_data["email"])
        except BackendError as exc:
            return _error_response(exc)
        return Response({"message": body.get("message") or "OTP resent successfully!"})


class AdminVerifyOtpView(APIView):
    def post(self, request):
        serializer = OtpVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        try:
            body = get_booking_backend().admin_verify_otp(params["email"], params["otp"])
        except BackendError as exc:
            return _error_response(exc)

        if not body.get("token"):
            logger.warning("Admin OTP verification returned no token")
            return Response({"message": "Invalid OTP or server error."}, status=status.HTTP_502_BAD_GATEWAY)

        context = SessionContext.from_request(request)
        context.admin_token = body["token"]
        context.admin_data = body.get("admin")
        return Response({"message": "Login successful", "admin": body.get("admin")})


class CityListView(APIView):
    permission_classes = [HasAdminToken]

    def get(self, request):
        try:
            cities = _admin_backend(request).list_cities()
        except BackendError as exc:
            return _error_response(exc)
        return Response({"cities": cities})

    def post(self, request):
        serializer = CitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        city = serializer.validated_data

        try:
            _admin_backend(request).add_city(city)
        except BackendError as exc:
            return _error_response(exc)
        return Response({"message": f"{city['name']} ({city['terminal']})"}, status=status.HTTP_201_CREATED)


class CityDetailView(APIView):
    permission_classes = [HasAdminToken]

    def put(self, request, city_id):
        serializer = CitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        city = {**serializer.validated_data, "_id": city_id}

        try:
            _admin_backend(request).update_city(city_id, city)
        except BackendError as exc:
            return _error_response(exc)
        return Response({"message": f"{city['name']} ({city['terminal']})"})

    def delete(self, request, city_id):
        try:
            _admin_backend(request).delete_city(city_id)
        except BackendError as exc:
            return _error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TripResultsView(APIView):
    def post(self, request):
        serializer = TripIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            trips = get_booking_backend().search_trips_by_id(serializer.validated_data["ids"])
        except BackendError as exc:
            return _error_response(exc)

        term = (request.query_params.get("q") or "").strip()
        payload = {"query": term, "total": len(trips), "trips": search_trips(trips, term)}
        if not trips:
            payload["message"] = "No trips found for the provided IDs."
        return Response(payload)


class TripSeatsView(APIView):
    def get(self, request, trip_id):
        try:
            trips = get_booking_backend().search_trips_by_id([trip_id])
        except BackendError as exc:
            return _error_response(exc)

        if not trips:
            return Response({"message": "Trip not found"}, status=status.HTTP_404_NOT_FOUND)

        trip = dict(trips[0])
        trip["seats"] = sorted(trip.get("seats") or [], key=lambda seat: seat["position"])
        trip["availableSeats"] = sum(
            1 for seat in trip["seats"] if not seat.get("isBooked") and not seat.get("isBooking")
        )
        return Response({"trip": trip})


class UserSendOtpView(APIView):
    def post(self, request):
        serializer = EmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            body = get_booking_backend().user_send_otp(serializer.validated_data["email"])
        except BackendError as exc:
            return _error_response(exc)
        return Response({"message": body.get("message") or "OTP sent to your email!"})


class UserVerifyOtpView(APIView):
    def post(self, request):
        serializer = OtpVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        try:
            body = get_booking_backend().user_verify_otp(params["email"], params["otp"])
        except BackendError as exc:
            return _error_response(exc)

        if not body.get("token"):
            return Response({"message": "Invalid OTP"}, status=status.HTTP_502_BAD_GATEWAY)

        context = SessionContext.from_request(request)
        context.token = body["token"]
        context.user = body.get("user")
        return Response({"user": body.get("user")})


class CheckoutView(APIView):
    """Seat selection checkout: record the seats, then start a payment."""

    permission_classes = [HasUserToken]

    def post(self, request):
        serializer = SeatSelectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        trip_id = serializer.validated_data["tripId"]
        seat_ids = serializer.validated_data["seatIds"]

        context = SessionContext.from_request(request)
        backend = get_booking_backend(token=context.token)
        try:
            trips = backend.search_trips_by_id([trip_id])
        except BackendError as exc:
            return _error_response(exc)
        if not trips:
            return Response({"message": "Trip not found"}, status=status.HTTP_404_NOT_FOUND)

        available = {
            seat["_id"]
            for seat in trips[0].get("seats") or []
            if not seat.get("isBooked") and not seat.get("isBooking")
        }
        unavailable = [seat_id for seat_id in seat_ids if seat_id not in available]
        if unavailable:
            return Response(
                {"message": "Seat is no longer available", "seatIds": unavailable},
                status=status.HTTP_400_BAD_REQUEST,
            )

        email = context.user_email
        amount = (trips[0].get("price") or 0) * len(seat_ids)
        context.selected_seat_ids = seat_ids

        payload = {
            "email": email,
            "amount": amount,
            "callback_url": f"{settings.PAYMENT_CALLBACK_URL}?{urlencode({'email': email})}",
            "seatIds": seat_ids,
            "userId": context.user_id,
            "tripId": trip_id,
        }
        try:
            body = backend.create_payment(payload)
        except BackendError as exc:
            return _error_response(exc)

        context.payment_reference = body.get("reference")
        return Response(
            {
                "reference": body.get("reference"),
                "authorizationUrl": body.get("authorizationUrl"),
                "amount": amount,
            },
            status=status.HTTP_201_CREATED,
        )


class PaymentVerifyView(APIView):
    permission_classes = [HasUserToken]

    def post(self, request):
        serializer = PaymentVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        context = SessionContext.from_request(request)
        reference = serializer.validated_data.get("reference") or context.payment_reference
        seat_ids = context.selected_seat_ids
        if not reference or not seat_ids:
            return Response(
                {"message": "Missing payment reference or seat information. Cannot verify."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        payload = {"email": context.user_email, "seatIds": seat_ids, "reference": reference}
        try:
            body = get_booking_backend(token=context.token).verify_payment(payload)
        except BackendError as exc:
            return _error_response(exc)

        bookings = body.get("bookings") or []
        context.clear_checkout()
        return Response(
            {
                "reference": reference,
                "bookings": bookings,
                "trip": body.get("trip"),
                "totalPaid": sum(booking.get("amount") or 0 for booking in bookings),
            }
        )


class MyTripsView(APIView):
    permission_classes = [HasUserToken]

    def get(self, request):
        query = UserTripsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        context = SessionContext.from_request(request)
        try:
            bookings = get_booking_backend(token=context.token).fetch_user_bookings(context.user_id)
        except BackendError as exc:
            return _error_response(exc)

        page_size = settings.TRIPS_PAGE_SIZE
        filtered = filter_user_bookings(bookings, params["tab"], timezone.now())
        pages = total_pages(len(filtered), page_size)
        page = clamp_page(params["page"], pages)

        results = []
        for booking in paginate(filtered, page, page_size):
            trip = booking.get("trip") or {}
            results.append(
                {
                    **booking,
                    "tripName": safe_text(trip.get("tripName")),
                    "bookedAt": safe_format(booking.get("createdAt")),
                    "takeoffDisplay": safe_format((trip.get("takeoff") or {}).get("date"), "M j, Y"),
                }
            )

        return Response(
            {
                "tab": params["tab"],
                "page": page,
                "pageSize": page_size,
                "totalPages": pages,
                "totalResults": len(filtered),
                "bookings": results,
            }
        )
