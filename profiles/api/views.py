"""Profiles API views.

Provides the public profile of a user (with posts), follower/following lists,
updating the caller's own profile, follow/unfollow and favorite toggles, and
user search. Toggles run inside a transaction; a follow relationship is a
single row, so both sides always change together.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from posts.api.serializers import PostSerializer
from posts.models import Post
from restaurants.models import Restaurant
from ..models import Follow, Profile
from .permissions import IsNotSelfTarget
from .serializers import ProfileUpdateSerializer, UserProfileSerializer, UserSummarySerializer

User = get_user_model()
logger = logging.getLogger(__name__)


# ----------------------------- helpers (module-level) -----------------------------

def toggle_follow(actor, target) -> bool:
    """Follow ``target`` or, if already following, unfollow. Returns new state."""
    with transaction.atomic():
        deleted, _ = Follow.objects.filter(follower=actor, followed=target).delete()
        if deleted:
            return False
        Follow.objects.create(follower=actor, followed=target)
        return True


def toggle_favorite(profile: Profile, restaurant: Restaurant) -> bool:
    """Add ``restaurant`` to favorites or remove it if present. Returns new state."""
    with transaction.atomic():
        if profile.favorite_restaurants.filter(pk=restaurant.pk).exists():
            profile.favorite_restaurants.remove(restaurant)
            return False
        profile.favorite_restaurants.add(restaurant)
        return True


def _user_posts(user):
    return (
        Post.objects.filter(user=user)
        .select_related("user", "user__profile", "restaurant")
        .prefetch_related("likes", "comments__user__profile")
        .order_by("-created_at", "-id")
    )


# --------------------------------------- views ---------------------------------------

class UserProfileAPIView(APIView):
    """GET /api/users/{id}/ -> user with social graph, and their posts."""

    def get(self, request, pk):
        user = get_object_or_404(User.objects.select_related("profile"), pk=pk)
        data = {
            "user": UserProfileSerializer(user).data,
            "posts": PostSerializer(_user_posts(user), many=True, context={"request": request}).data,
        }
        return Response(data, status=status.HTTP_200_OK)


class ProfileUpdateAPIView(APIView):
    """PUT /api/users/profile/ -> update the authenticated user's own profile."""

    permission_classes = [IsAuthenticated]

    def put(self, request):
        profile = Profile.for_user(request.user)
        serializer = ProfileUpdateSerializer(
            profile, data=request.data, partial=True, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_200_OK)


class FollowToggleAPIView(APIView):
    """PUT /api/users/{id}/follow/ -> follow or unfollow (never yourself)."""

    permission_classes = [IsAuthenticated, IsNotSelfTarget]

    def put(self, request, pk):
        target = get_object_or_404(User, pk=pk)
        is_following = toggle_follow(request.user, target)
        logger.info(
            "User #%s %s user #%s", request.user.id, "followed" if is_following else "unfollowed", target.id
        )
        return Response(
            {
                "is_following": is_following,
                "message": "User followed" if is_following else "User unfollowed",
            },
            status=status.HTTP_200_OK,
        )


class FollowersListAPIView(generics.ListAPIView):
    """GET /api/users/{id}/followers/ -> users following the given user."""

    serializer_class = UserSummarySerializer
    pagination_class = None

    def get_queryset(self):
        user = get_object_or_404(User, pk=self.kwargs["pk"])
        return User.objects.filter(following_set__followed=user).select_related("profile").order_by("id")


class FollowingListAPIView(generics.ListAPIView):
    """GET /api/users/{id}/following/ -> users the given user follows."""

    serializer_class = UserSummarySerializer
    pagination_class = None

    def get_queryset(self):
        user = get_object_or_404(User, pk=self.kwargs["pk"])
        return User.objects.filter(follower_set__follower=user).select_related("profile").order_by("id")


class FavoriteToggleAPIView(APIView):
    """PUT /api/users/favorites/{restaurant_id}/ -> toggle a favorite restaurant."""

    permission_classes = [IsAuthenticated]

    def put(self, request, restaurant_id):
        restaurant = get_object_or_404(Restaurant, pk=restaurant_id)
        is_favorite = toggle_favorite(Profile.for_user(request.user), restaurant)
        return Response(
            {
                "is_favorite": is_favorite,
                "message": (
                    "Restaurant added to favorites" if is_favorite else "Restaurant removed from favorites"
                ),
            },
            status=status.HTTP_200_OK,
        )


class UserSearchAPIView(generics.ListAPIView):
    """GET /api/users/search/?query= -> substring match on username or email."""

    serializer_class = UserSummarySerializer

    def get_queryset(self):
        query = (self.request.query_params.get("query") or "").strip()
        if not query:
            raise ValidationError({"query": "A non-empty search query is required."})
        return (
            User.objects.filter(Q(username__icontains=query) | Q(email__icontains=query))
            .select_related("profile")
            .order_by("id")
        )
