"""Auth API serializers.

Provides serializers for user registration and login, plus the compact user
representation embedded by posts, restaurants and profiles. Registration
rejects taken usernames/emails with a conflict; login authenticates by email.
"""

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.password_validation import validate_password
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed

from common.api.exceptions import Conflict
from profiles.models import Profile

User = get_user_model()


def _profile_of(user):
    return getattr(user, "profile", None) if user is not None else None


class UserMiniSerializer(serializers.ModelSerializer):
    """Identity fields shown next to posts, comments, reviews and follows."""

    profile_picture = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "username", "profile_picture"]

    def get_profile_picture(self, obj):
        profile = _profile_of(obj)
        return profile.profile_picture if profile else ""


class RegistrationSerializer(serializers.Serializer):
    """Validate and create a new user with an empty profile."""

    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)

    def validate_username(self, value):
        if User.objects.filter(username__iexact=value).exists():
            raise Conflict(_("User with this username already exists."))
        return value

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise Conflict(_("User with this email already exists."))
        return value

    def validate(self, attrs):
        validate_password(attrs["password"], User(username=attrs["username"], email=attrs["email"]))
        return attrs

    def create(self, validated_data):
        raw_password = validated_data.pop("password")
        user = User(**validated_data)
        user.set_password(raw_password)
        user.save()
        Profile.objects.create(user=user)
        return user


class LoginSerializer(serializers.Serializer):
    """Authenticate email/password and attach the user to validated data."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        account = User.objects.filter(email__iexact=attrs.get("email")).first()
        user = None
        if account is not None:
            user = authenticate(username=account.username, password=attrs.get("password"))
        if not user:
            raise AuthenticationFailed(_("Invalid credentials."))
        attrs["user"] = user
        return attrs


class CurrentUserSerializer(serializers.ModelSerializer):
    """The authenticated user's own account, including graph memberships."""

    bio = serializers.SerializerMethodField()
    profile_picture = serializers.SerializerMethodField()
    followers = serializers.SerializerMethodField()
    following = serializers.SerializerMethodField()
    favorite_restaurants = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "bio",
            "profile_picture",
            "followers",
            "following",
            "favorite_restaurants",
            "date_joined",
        ]

    def get_bio(self, obj):
        profile = _profile_of(obj)
        return profile.bio if profile else ""

    def get_profile_picture(self, obj):
        profile = _profile_of(obj)
        return profile.profile_picture if profile else ""

    def get_followers(self, obj):
        return list(obj.follower_set.values_list("follower_id", flat=True))

    def get_following(self, obj):
        return list(obj.following_set.values_list("followed_id", flat=True))

    def get_favorite_restaurants(self, obj):
        profile = _profile_of(obj)
        return list(profile.favorite_restaurants.values_list("id", flat=True)) if profile else []
