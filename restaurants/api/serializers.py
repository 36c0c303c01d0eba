"""Restaurants API serializers.

Provide serializers for listing, searching and showing restaurants (menu and
reviews included on detail), creating a restaurant (soft conflict on an
existing name + street + city), field-level updates, merging menu items and
upserting a user's review with rating recomputation.
"""

from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from common.api.exceptions import Conflict
from common.geo import geo_point
from common.media import store_image
from common.text import split_csv
from user_auth_app.api.serializers import UserMiniSerializer

from ..menu import upsert_menu_item
from ..models import MenuItem, Restaurant, Review

ADDRESS_FIELDS = ("street", "city", "state", "zip_code", "country")


# --------------------------- helpers (pure functions) ---------------------------

def _request(serializer):
    return serializer.context.get("request")


def _validate_coordinates(attrs):
    lat, lon = attrs.get("latitude"), attrs.get("longitude")
    if (lat is None) != (lon is None):
        raise serializers.ValidationError(
            {"latitude": "latitude and longitude must be provided together."}
        )


# ------------------------------ custom field ------------------------------

class CsvListField(serializers.Field):
    """
    Accepts EITHER a comma-separated string OR a list of strings.
    Segments are trimmed and empty ones dropped; representation is a list.
    """

    def to_internal_value(self, data):
        if data is None:
            return []
        if not isinstance(data, (str, list, tuple)):
            raise serializers.ValidationError("Must be a comma-separated string or a list of strings.")
        return split_csv(data)

    def to_representation(self, value):
        return list(value or [])


# --------------------------------- output ---------------------------------

class ReviewSerializer(serializers.ModelSerializer):
    """Read serializer for a review with the reviewer resolved."""

    user = UserMiniSerializer(read_only=True)

    class Meta:
        model = Review
        fields = ["id", "user", "text", "rating", "created_at"]


class MenuItemSerializer(serializers.ModelSerializer):
    """Menu item with contributor and post references as ids."""

    contributors = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    posts = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = MenuItem
        fields = [
            "id",
            "name",
            "description",
            "price",
            "category",
            "images",
            "tags",
            "contributors",
            "posts",
        ]


class RestaurantMiniSerializer(serializers.ModelSerializer):
    """Name and address, embedded next to posts."""

    address = serializers.ReadOnlyField()

    class Meta:
        model = Restaurant
        fields = ["id", "name", "address"]


class RestaurantListSerializer(serializers.ModelSerializer):
    """List representation used by listing, nearby and favorites."""

    address = serializers.ReadOnlyField()
    location = serializers.SerializerMethodField()

    class Meta:
        model = Restaurant
        fields = [
            "id",
            "name",
            "address",
            "location",
            "images",
            "rating",
            "cuisine",
            "price_range",
        ]

    def get_location(self, obj):
        return geo_point(obj)


class RestaurantSearchSerializer(RestaurantListSerializer):
    """List representation plus the relevance score of a search hit."""

    score = serializers.FloatField(read_only=True)

    class Meta(RestaurantListSerializer.Meta):
        fields = RestaurantListSerializer.Meta.fields + ["score"]


class RestaurantDetailSerializer(RestaurantListSerializer):
    """Full restaurant including menu items and reviews."""

    menu = MenuItemSerializer(source="menu_items", many=True, read_only=True)
    reviews = ReviewSerializer(many=True, read_only=True)

    class Meta(RestaurantListSerializer.Meta):
        fields = RestaurantListSerializer.Meta.fields + [
            "phone",
            "website",
            "hours",
            "menu",
            "reviews",
            "created_at",
            "updated_at",
        ]


# ------------------------------ create / update ------------------------------

class RestaurantCreateSerializer(serializers.Serializer):
    """Input serializer for creating a restaurant.

    A restaurant with the same name, street and city is a soft conflict: the
    existing record is returned with the 409 so clients can reuse it.
    """

    name = serializers.CharField(max_length=200)
    street = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    city = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    state = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    zip_code = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    country = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    website = serializers.URLField(required=False, allow_blank=True, default="")
    hours = serializers.DictField(required=False, default=dict)
    cuisine = CsvListField(required=False, default=list)
    price_range = serializers.ChoiceField(
        choices=Restaurant.PriceRange.choices, required=False, allow_blank=True, default=""
    )
    image = serializers.CharField(required=False, allow_blank=True, write_only=True)

    def validate(self, attrs):
        """Reject coordinates given one without the other and duplicates."""
        _validate_coordinates(attrs)
        existing = Restaurant.objects.filter(
            name=attrs["name"], street=attrs.get("street", ""), city=attrs.get("city", "")
        ).first()
        if existing is not None:
            raise Conflict(
                "Restaurant already exists.",
                data=RestaurantDetailSerializer(existing, context=self.context).data,
            )
        return attrs

    def create(self, validated_data):
        """Store the optional image first, then create the restaurant."""
        image = validated_data.pop("image", None)
        images = [store_image(image, "restaurants", _request(self))] if image else []
        return Restaurant.objects.create(images=images, **validated_data)


class RestaurantUpdateSerializer(serializers.Serializer):
    """Field-level update; only provided, non-empty values change."""

    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    street = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    zip_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, required=False, allow_blank=True)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    website = serializers.URLField(required=False, allow_blank=True)
    hours = serializers.DictField(required=False)
    cuisine = CsvListField(required=False)
    price_range = serializers.ChoiceField(
        choices=Restaurant.PriceRange.choices, required=False, allow_blank=True
    )
    image = serializers.CharField(required=False, allow_blank=True, write_only=True)

    # ------------------------- private helpers (update) -------------------------

    def _apply_scalars(self, instance: Restaurant, data: dict) -> None:
        for f in ("name", *ADDRESS_FIELDS, "phone", "website", "price_range"):
            if data.get(f):
                setattr(instance, f, data[f])
        if data.get("cuisine"):
            instance.cuisine = data["cuisine"]
        if data.get("hours"):
            instance.hours = data["hours"]

    def _apply_location(self, instance: Restaurant, data: dict) -> None:
        lat, lon = data.get("latitude"), data.get("longitude")
        if lat is not None and lon is not None:
            instance.latitude, instance.longitude = lat, lon

    # --------------------------------- update ----------------------------------

    def update(self, instance: Restaurant, validated_data):
        """Upload a new image if given, then apply the provided fields."""
        image = validated_data.pop("image", None)
        if image:
            instance.add_image(store_image(image, "restaurants", _request(self)))
        self._apply_scalars(instance, validated_data)
        self._apply_location(instance, validated_data)
        instance.save()
        return instance


class MenuItemCreateSerializer(serializers.Serializer):
    """Input serializer for adding (or merging into) a menu item."""

    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    tags = CsvListField(required=False)
    image = serializers.CharField(required=False, allow_blank=True, write_only=True)

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Name must not be blank.")
        return value.strip()

    def create(self, validated_data):
        """Store the optional image, then merge by case-insensitive name."""
        restaurant = self.context["restaurant"]
        user = _request(self).user
        image = validated_data.pop("image", None)
        image_url = store_image(image, "menu-items", _request(self)) if image else None

        with transaction.atomic():
            item, created = upsert_menu_item(restaurant, user, image_url=image_url, **validated_data)
        self.created = created
        return item


class ReviewCreateSerializer(serializers.Serializer):
    """Input serializer for a user's review of a restaurant."""

    rating = serializers.IntegerField(min_value=1, max_value=5)
    text = serializers.CharField(required=False, allow_blank=True, default="")

    @transaction.atomic
    def create(self, validated_data):
        """Insert or overwrite the user's review and recompute the rating."""
        restaurant = self.context["restaurant"]
        user = _request(self).user
        review, _ = Review.objects.update_or_create(
            restaurant=restaurant,
            user=user,
            defaults={
                "rating": validated_data["rating"],
                "text": validated_data.get("text", "") or "",
                "created_at": timezone.now(),
            },
        )
        restaurant.recompute_rating()
        return review
