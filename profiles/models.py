"""Profiles app models.

Profile extends the base user with display data and favorite restaurants.
Follow rows model the social graph: one row per (follower, followed) pair, so
"A follows B" and "A is among B's followers" are the same fact.
"""

from django.conf import settings
from django.db import models


class Profile(models.Model):
    """Display data and favorites for a single user (OneToOne)."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    bio = models.TextField(blank=True, default="")
    profile_picture = models.URLField(max_length=500, blank=True, default="")
    favorite_restaurants = models.ManyToManyField(
        "restaurants.Restaurant",
        blank=True,
        related_name="favorited_by",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    @classmethod
    def for_user(cls, user):
        """Return the user's profile, creating an empty one on first access."""
        profile, _ = cls.objects.get_or_create(user=user)
        return profile

    def __str__(self):
        """Readable representation for admin and debugging."""
        return f"Profile<{self.user_id}:{self.user.username}>"


class Follow(models.Model):
    """``follower`` follows ``followed``."""

    follower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="following_set",
    )
    followed = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="follower_set",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["follower", "followed"],
                name="unique_follow_per_pair",
            ),
        ]
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        return f"Follow<{self.follower_id}->{self.followed_id}>"
