from django.core.exceptions import ObjectDoesNotExist
from rest_framework.permissions import BasePermission


class IsAdminProfile(BasePermission):
    """
    Grants access to platform admins: staff accounts, or users whose profile role is 'admin'.

    Used on every moderation endpoint. Object-level checks are not needed because admins may
    act on any campsite, owner request or review.
    """
    message = "Only admins can perform moderation actions."

    def has_permission(self, request, view):
        """
        Args:
            request: The incoming request object, containing the authenticated user.
            view: The view handling the request.

        Returns:
            bool: True if the user is authenticated and an admin, False otherwise.
        """
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_staff:
            return True

        try:
            return user.profile.is_admin
        except ObjectDoesNotExist:
            return False
