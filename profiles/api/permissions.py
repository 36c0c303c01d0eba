"""Profiles API permissions.

Contains custom permission classes used by social-graph endpoints.
"""

from rest_framework.permissions import BasePermission


class IsNotSelfTarget(BasePermission):
    """
    Reject actions whose target user (URL ``pk``) is the acting user.

    Used by follow/unfollow: following yourself is not allowed, and the check
    runs before any write.
    """

    message = "You cannot follow yourself."

    def has_permission(self, request, view):
        target = view.kwargs.get("pk")
        user = request.user
        if not user or not user.is_authenticated or target is None:
            return True
        return int(target) != user.id
