"""Posts API permissions.

Contains the object-level permission that restricts deletion to the author.
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission


class IsPostOwner(BasePermission):
    """Allow modifications or deletion only by the post's author.

    Read permissions (GET on detail) are always granted.
    """

    message = "Not authorized to delete this post."

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        user = request.user
        return bool(user and user.is_authenticated and obj.user_id == user.id)
