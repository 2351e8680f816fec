from django.core.exceptions import ObjectDoesNotExist
from rest_framework import permissions

from profile_app.models import Profile


class IsOwnerUser(permissions.BasePermission):
    """
    Custom permission to only allow users with an 'owner' profile to perform an action.

    This is role-based access control on the `role` field of the user's `Profile`. Whether
    the owner actually owns the campsite in question is decided by the service, since that
    needs the review's campsite.
    """
    message = "Only campsite owners can respond to reviews."

    def has_permission(self, request, view):
        """
        Grants access to authenticated users whose profile role is 'owner'.

        Returns:
            bool: True if permission is granted, False otherwise.
        """
        # Anonymous users have no profile to check.
        if not request.user or not request.user.is_authenticated:
            return False

        try:
            return request.user.profile.role == Profile.Role.OWNER
        except ObjectDoesNotExist:
            # Users without a profile cannot be owners.
            return False
