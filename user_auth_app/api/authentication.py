"""Bearer token authentication.

Tokens are DRF authtoken keys sent as ``Authorization: Bearer <key>``; clients
attach the header to each request themselves.
"""

from rest_framework.authentication import TokenAuthentication
from rest_framework.authtoken.models import Token


class BearerTokenAuthentication(TokenAuthentication):
    """TokenAuthentication using the ``Bearer`` keyword."""

    keyword = "Bearer"


def issue_token(user) -> str:
    """Return the user's token key, creating the token on first use."""
    token, _ = Token.objects.get_or_create(user=user)
    return token.key
