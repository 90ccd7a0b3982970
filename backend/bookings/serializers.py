from rest_framework import serializers

from bookings.services.query import TAB_ALL, TABS


def _optional_text(**kwargs):
    return serializers.CharField(required=False, allow_null=True, allow_blank=True, **kwargs)


class LocationSerializer(serializers.Serializer):
    city = serializers.CharField(allow_blank=True)
    location = _optional_text()


class TakeoffSerializer(serializers.Serializer):
    # Kept as text: an unparsable date degrades to a "finished" status, it is not rejected.
    date = _optional_text()
    time = _optional_text()


class TripDetailsSerializer(serializers.Serializer):
    tripName = _optional_text()
    tripId = _optional_text()
    bus = _optional_text()
    pickup = LocationSerializer()
    dropoff = LocationSerializer()
    takeoff = TakeoffSerializer(required=False, allow_null=True)
    departureTime = _optional_text()
    arrivalTime = _optional_text()
    price = serializers.FloatField(required=False, allow_null=True)


class RawBookingRecordSerializer(serializers.Serializer):
    """One seat of a booking as returned by ``GET /trips/bookings``."""

    bookingCode = serializers.CharField()
    passengerEmail = serializers.CharField(allow_blank=True)
    route = serializers.CharField(allow_blank=True)
    seatId = _optional_text()
    seatPosition = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    amount = serializers.FloatField()
    date = _optional_text()
    tripDetails = TripDetailsSerializer()


class SeatSerializer(serializers.Serializer):
    _id = serializers.CharField()
    position = serializers.IntegerField(min_value=1)
    isBooked = serializers.BooleanField(required=False)
    isBooking = serializers.BooleanField(required=False)


class TripSerializer(serializers.Serializer):
    _id = serializers.CharField()
    tripName = serializers.CharField(allow_blank=True)
    pickup = LocationSerializer()
    dropoff = LocationSerializer()
    takeoff = TakeoffSerializer(required=False, allow_null=True)
    arrivalTime = _optional_text()
    price = serializers.FloatField(required=False, allow_null=True)
    seats = SeatSerializer(many=True, required=False)


class UserBookingSerializer(serializers.Serializer):
    """A passenger's booking as returned by ``GET /pay/trips/:userId``."""

    bookingCode = serializers.CharField()
    amount = serializers.FloatField()
    paymentReference = _optional_text()
    position = serializers.IntegerField(required=False, allow_null=True)
    seat = SeatSerializer(required=False, allow_null=True)
    trip = TripSerializer(required=False, allow_null=True)
    createdAt = _optional_text()


class CitySerializer(serializers.Serializer):
    _id = serializers.CharField(required=False)
    name = serializers.CharField(
        max_length=120,
        error_messages={"required": "City name is required", "blank": "City name is required"},
    )
    state = _optional_text(max_length=120)
    country = _optional_text(max_length=120)
    terminal = serializers.CharField(
        max_length=200,
        error_messages={"required": "Terminal name is required", "blank": "Terminal name is required"},
    )


class EmailSerializer(serializers.Serializer):
    email = serializers.EmailField()

    def validate_email(self, value):
        return value.strip().lower()


class OtpVerifySerializer(EmailSerializer):
    otp = serializers.CharField(min_length=4, max_length=8)


class TripIdsSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.CharField(), min_length=1)


class SeatSelectionSerializer(serializers.Serializer):
    tripId = serializers.CharField()
    seatIds = serializers.ListField(child=serializers.CharField(), min_length=1)

    def validate_seatIds(self, value):
        # A seat toggled twice must not be charged twice.
        return list(dict.fromkeys(value))


class PaymentVerifySerializer(serializers.Serializer):
    reference = serializers.CharField(required=False)


class BookingQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, default="")
    page = serializers.IntegerField(min_value=1, required=False, default=1)


class UserTripsQuerySerializer(serializers.Serializer):
    tab = serializers.ChoiceField(choices=TABS, required=False, default=TAB_ALL)
    page = serializers.IntegerField(min_value=1, required=False, default=1)
