"""Restaurants app models.

Defines Restaurant with its menu items and reviews. A menu item name is unique
per restaurant under case-insensitive comparison; a user leaves at most one
review per restaurant. ``Restaurant.rating`` is always recomputed from the
current reviews, never maintained incrementally.

Case-insensitive matching goes through ``str.casefold`` keys stored next to
the text (``MenuItem.name_key``, ``Restaurant.search_text``); SQLite's
``LOWER()`` and ``LIKE`` only fold ASCII letters.
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Avg
from django.utils import timezone


def casefold_key(value) -> str:
    """Trimmed, Unicode case-folded form of ``value`` used for matching."""
    return str(value or "").strip().casefold()


class Restaurant(models.Model):
    """A restaurant that posts, menu items and reviews attach to."""

    class PriceRange(models.TextChoices):
        BUDGET = "$", "$"
        MODERATE = "$$", "$$"
        EXPENSIVE = "$$$", "$$$"
        LUXURY = "$$$$", "$$$$"

    name = models.CharField(max_length=200)
    street = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    zip_code = models.CharField(max_length=20, blank=True, default="")
    country = models.CharField(max_length=100, blank=True, default="")

    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    images = models.JSONField(default=list, blank=True)
    phone = models.CharField(max_length=50, blank=True, default="")
    website = models.URLField(blank=True, default="")
    hours = models.JSONField(default=dict, blank=True)
    rating = models.FloatField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    cuisine = models.JSONField(default=list, blank=True)
    search_text = models.TextField(blank=True, default="", editable=False)
    price_range = models.CharField(max_length=4, choices=PriceRange.choices, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name", "id"]
        indexes = [
            models.Index(fields=["latitude", "longitude"], name="restaurant_location_idx"),
        ]

    def __str__(self):
        return f"{self.name} (#{self.pk})"

    def save(self, *args, **kwargs):
        self.search_text = " ".join(
            casefold_key(part) for part in [self.name, *self.cuisine] if casefold_key(part)
        )
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and {"name", "cuisine"} & set(update_fields):
            kwargs["update_fields"] = {*update_fields, "search_text"}
        super().save(*args, **kwargs)

    @property
    def address(self) -> dict:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "country": self.country,
        }

    def add_image(self, url) -> bool:
        """Append ``url`` to the image list if absent; return True if added."""
        if not url or url in self.images:
            return False
        self.images = [*self.images, url]
        return True

    def recompute_rating(self) -> float:
        """Set ``rating`` to the mean of all current review ratings and save it."""
        avg = self.reviews.aggregate(avg=Avg("rating"))["avg"]
        self.rating = float(avg) if avg is not None else 0.0
        self.save(update_fields=["rating", "updated_at"])
        return self.rating


class MenuItem(models.Model):
    """Canonical record of a dish, aggregated from posts and direct additions."""

    DEFAULT_CATEGORY = "Uncategorized"

    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name="menu_items")
    name = models.CharField(max_length=200)
    name_key = models.CharField(max_length=255, editable=False)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    category = models.CharField(max_length=100, blank=True, default=DEFAULT_CATEGORY)
    images = models.JSONField(default=list, blank=True)
    tags = models.JSONField(default=list, blank=True)
    contributors = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="contributed_menu_items",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["restaurant", "name_key"],
                name="unique_menu_item_name_per_restaurant",
            )
        ]

    def __str__(self):
        return f"{self.name} @ restaurant #{self.restaurant_id}"

    def save(self, *args, **kwargs):
        self.name_key = casefold_key(self.name)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "name" in update_fields:
            kwargs["update_fields"] = {*update_fields, "name_key"}
        super().save(*args, **kwargs)


class Review(models.Model):
    """A user's rating and text for a restaurant; one per (restaurant, user)."""

    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name="reviews")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="restaurant_reviews",
    )
    text = models.TextField(blank=True, default="")
    rating = models.IntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["restaurant", "user"],
                name="unique_review_per_restaurant_and_user",
            )
        ]
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        return f"Review<{self.id} {self.user_id}->{self.restaurant_id} {self.rating}>"
