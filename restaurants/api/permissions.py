"""Restaurants API permissions.

Reads are public; creating restaurants and adding menu items, reviews or
edits requires an authenticated user.
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission


class IsAuthenticatedForWrites(BasePermission):
    """SAFE methods are always allowed; writes need an authenticated user."""

    message = "Authentication is required to modify restaurants."

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_authenticated)
