from rest_framework.permissions import BasePermission

from bookings.session import SessionContext


class HasAdminToken(BasePermission):
    message = "Admin session required."

    def has_permission(self, request, view):
        return SessionContext.from_request(request).is_admin


class HasUserToken(BasePermission):
    message = "Please verify your email to continue."

    def has_permission(self, request, view):
        context = SessionContext.from_request(request)
        return bool(context.token and context.user_id)
