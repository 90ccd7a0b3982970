from django.urls import path

from bookings.views import (
    AdminBackupView,
    AdminBookingsExportView,
    AdminBookingsView,
    AdminDashboardExportView,
    AdminDashboardView,
    AdminLoginView,
    AdminLogoutView,
    AdminResendOtpView,
    AdminVerifyOtpView,
    CheckoutView,
    CityDetailView,
    CityListView,
    HealthView,
    MyTripsView,
    PaymentVerifyView,
    TripResultsView,
    TripSeatsView,
    UserSendOtpView,
    UserVerifyOtpView,
)

urlpatterns = [
    path("health", HealthView.as_view(), name="health"),
    path("admin/login", AdminLoginView.as_view(), name="admin-login"),
    path("admin/verify-otp", AdminVerifyOtpView.as_view(), name="admin-verify-otp"),
    path("admin/resend-otp", AdminResendOtpView.as_view(), name="admin-resend-otp"),
    path("admin/logout", AdminLogoutView.as_view(), name="admin-logout"),
    path("admin/dashboard", AdminDashboardView.as_view(), name="admin-dashboard"),
    path("admin/dashboard/export", AdminDashboardExportView.as_view(), name="admin-dashboard-export"),
    path("admin/bookings", AdminBookingsView.as_view(), name="admin-bookings"),
    path("admin/bookings/export", AdminBookingsExportView.as_view(), name="admin-bookings-export"),
    path("admin/backup", AdminBackupView.as_view(), name="admin-backup"),
    path("admin/cities", CityListView.as_view(), name="admin-cities"),
    path("admin/cities/<str:city_id>", CityDetailView.as_view(), name="admin-city-detail"),
    path("trips/results", TripResultsView.as_view(), name="trip-results"),
    path("trips/<str:trip_id>/seats", TripSeatsView.as_view(), name="trip-seats"),
    path("auth/send-otp", UserSendOtpView.as_view(), name="user-send-otp"),
    path("auth/verify-otp", UserVerifyOtpView.as_view(), name="user-verify-otp"),
    path("checkout", CheckoutView.as_view(), name="checkout"),
    path("checkout/verify", PaymentVerifyView.as_view(), name="payment-verify"),
    path("my-trips", MyTripsView.as_view(), name="my-trips"),
]
