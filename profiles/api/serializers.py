"""Profiles API serializers.

Contains serializers for:
- the public profile of a user (followers, following, favorite restaurants),
- compact user rows for follower/following lists and user search,
- updating the caller's own profile (username, email, bio, picture).

String fields never return ``null`` in responses, but empty strings instead.
"""

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers

from common.api.exceptions import Conflict
from common.media import is_remote_url, store_image
from restaurants.models import Restaurant
from ..models import Profile

User = get_user_model()


# ------------------------------ helpers ------------------------------

def _profile_attr(user, attr: str) -> str:
    profile = getattr(user, "profile", None)
    return (getattr(profile, attr, "") or "") if profile else ""


# ------------------------------ custom field ------------------------------

class ImageOrURLField(serializers.Field):
    """
    Accepts EITHER a base64 image OR an http(s) URL string.
    Representation is always a (possibly empty) string.
    """

    def to_internal_value(self, data):
        if data in (None, ""):
            return ""
        if isinstance(data, str):
            return data
        raise serializers.ValidationError(
            "profile_picture must be a base64 image or a URL string."
        )

    def to_representation(self, value):
        return value or ""


# ------------------------------ serializers ------------------------------

class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user row for follower/following lists and search results."""

    profile_picture = serializers.SerializerMethodField()
    bio = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "username", "profile_picture", "bio"]

    def get_profile_picture(self, obj):
        return _profile_attr(obj, "profile_picture")

    def get_bio(self, obj):
        return _profile_attr(obj, "bio")


class FavoriteRestaurantSerializer(serializers.ModelSerializer):
    """Restaurant fields shown on a profile's favorites list."""

    class Meta:
        model = Restaurant
        fields = ["id", "name", "images", "rating"]


class UserProfileSerializer(UserSummarySerializer):
    """Public profile: account data plus the user's social graph."""

    followers = serializers.SerializerMethodField()
    following = serializers.SerializerMethodField()
    favorite_restaurants = serializers.SerializerMethodField()

    class Meta(UserSummarySerializer.Meta):
        fields = UserSummarySerializer.Meta.fields + [
            "email",
            "followers",
            "following",
            "favorite_restaurants",
            "date_joined",
        ]

    def get_followers(self, obj):
        users = User.objects.filter(following_set__followed=obj).select_related("profile").order_by("id")
        return UserSummarySerializer(users, many=True).data

    def get_following(self, obj):
        users = User.objects.filter(follower_set__follower=obj).select_related("profile").order_by("id")
        return UserSummarySerializer(users, many=True).data

    def get_favorite_restaurants(self, obj):
        profile = getattr(obj, "profile", None)
        if profile is None:
            return []
        return FavoriteRestaurantSerializer(profile.favorite_restaurants.order_by("name"), many=True).data


class ProfileUpdateSerializer(serializers.Serializer):
    """
    Update of the caller's own profile.

    Username and email must stay unique (conflict otherwise). A picture given
    as URL is kept as-is; anything else is treated as a base64 upload.
    """

    username = serializers.CharField(max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    bio = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    profile_picture = ImageOrURLField(required=False)

    def validate_username(self, value):
        user = self.context["request"].user
        if value and value != user.username:
            if User.objects.filter(username__iexact=value).exclude(pk=user.pk).exists():
                raise Conflict("Username already taken.")
        return value

    def validate_email(self, value):
        user = self.context["request"].user
        if value and value != user.email:
            if User.objects.filter(email__iexact=value).exclude(pk=user.pk).exists():
                raise Conflict("Email already taken.")
        return value

    def _resolve_picture(self, profile: Profile, incoming: str) -> str:
        if not incoming or incoming == profile.profile_picture or is_remote_url(incoming):
            return incoming
        return store_image(incoming, "profile-pictures", self.context.get("request"), field="profile_picture")

    def update(self, instance: Profile, validated_data):
        """Upload a new picture if needed, then update user and profile together."""
        picture = None
        if "profile_picture" in validated_data:
            picture = self._resolve_picture(instance, validated_data["profile_picture"])

        with transaction.atomic():
            user = instance.user
            user.username = validated_data.get("username") or user.username
            user.email = validated_data.get("email") or user.email
            user.save(update_fields=["username", "email"])

            if "bio" in validated_data:
                instance.bio = validated_data["bio"] or ""
            if picture is not None:
                instance.profile_picture = picture
            instance.save()
        return instance

    def to_representation(self, instance: Profile):
        user = instance.user
        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "bio": instance.bio or "",
            "profile_picture": instance.profile_picture or "",
        }
