"""Posts app models.

A Post snapshots the dish fields (name, description, price, tags) at creation
time so later edits of the canonical menu item never rewrite history. Likes
are one row per (user, post); comments keep their creation order.
"""

from django.conf import settings
from django.db import models


class Post(models.Model):
    """A user's photo of a dish at a restaurant."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="posts",
    )
    restaurant = models.ForeignKey(
        "restaurants.Restaurant",
        on_delete=models.CASCADE,
        related_name="posts",
    )
    menu_item = models.ForeignKey(
        "restaurants.MenuItem",
        on_delete=models.SET_NULL,
        related_name="posts",
        null=True,
        blank=True,
    )

    dish_name = models.CharField(max_length=200)
    dish_description = models.TextField(blank=True, default="")
    dish_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    dish_tags = models.JSONField(default=list, blank=True)

    image = models.URLField(max_length=500)
    restaurant_image = models.URLField(max_length=500, blank=True, default="")

    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["-created_at"], name="post_created_idx"),
            models.Index(fields=["user", "-created_at"], name="post_user_created_idx"),
            models.Index(fields=["latitude", "longitude"], name="post_location_idx"),
        ]

    def __str__(self):
        return f"{self.dish_name} by #{self.user_id} (#{self.pk})"

    @property
    def dish(self) -> dict:
        return {
            "name": self.dish_name,
            "description": self.dish_description,
            "price": self.dish_price,
            "tags": self.dish_tags,
        }


class Like(models.Model):
    """A like on a post; one per user per post."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="post_likes",
    )
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="likes")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "post"], name="unique_like_per_user_and_post")
        ]

    def __str__(self):
        return f"Like<{self.user_id} -> {self.post_id}>"


class Comment(models.Model):
    """A comment on a post."""

    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="comments")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="post_comments",
    )
    text = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"Comment<{self.id} on {self.post_id} by {self.user_id}>"
