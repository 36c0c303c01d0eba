"""Auth API views.

Implements bearer-token registration, login and the current-user endpoint.
Registration also creates an empty Profile for the new user.
"""

import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from profiles.models import Profile
from .authentication import issue_token
from .permissions import AllowAnyRegistration, AllowedAnyLogin
from .serializers import CurrentUserSerializer, LoginSerializer, RegistrationSerializer

logger = logging.getLogger(__name__)


def _auth_payload(user) -> dict:
    profile = Profile.for_user(user)
    return {
        "token": issue_token(user),
        "user_id": user.id,
        "username": user.username,
        "email": user.email,
        "profile_picture": profile.profile_picture,
    }


class RegistrationView(APIView):
    """POST /api/auth/register/ -> create user and profile, return bearer token."""

    permission_classes = [AllowAnyRegistration]

    def post(self, request, *args, **kwargs):
        serializer = RegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered user #%s (%s)", user.id, user.username)
        return Response(_auth_payload(user), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """POST /api/auth/login/ -> validate email/password and return bearer token."""

    permission_classes = [AllowedAnyLogin]

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        return Response(_auth_payload(user), status=status.HTTP_200_OK)


class CurrentUserView(APIView):
    """GET /api/auth/me/ -> the authenticated user's account."""

    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        Profile.for_user(request.user)
        return Response(CurrentUserSerializer(request.user).data, status=status.HTTP_200_OK)
