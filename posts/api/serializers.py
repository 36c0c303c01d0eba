"""Posts API serializers.

Input/output serializers for authoring posts, representing posts (user and
restaurant resolved, dish snapshot, likes, comments) and adding comments.
Creating a post uploads the images first and only then, in one transaction,
merges the dish into the restaurant menu and stores the post.
"""

import logging
from decimal import Decimal

from django.db import transaction
from rest_framework import serializers

from common.geo import geo_point
from common.media import store_image
from posts.models import Comment, Post
from restaurants.api.serializers import CsvListField, RestaurantMiniSerializer
from restaurants.menu import merge_posted_dish
from restaurants.models import Restaurant
from user_auth_app.api.serializers import UserMiniSerializer

logger = logging.getLogger(__name__)


class DishSnapshotSerializer(serializers.Serializer):
    """The dish fields copied into a post at creation time."""

    name = serializers.CharField(source="dish_name")
    description = serializers.CharField(source="dish_description")
    price = serializers.DecimalField(source="dish_price", max_digits=10, decimal_places=2, allow_null=True)
    tags = serializers.ListField(source="dish_tags", child=serializers.CharField())


class CommentSerializer(serializers.ModelSerializer):
    """Read serializer for a comment with its author resolved."""

    user = UserMiniSerializer(read_only=True)

    class Meta:
        model = Comment
        fields = ["id", "user", "text", "created_at"]


class PostSerializer(serializers.ModelSerializer):
    """Read serializer for returning a complete post representation."""

    user = UserMiniSerializer(read_only=True)
    restaurant = RestaurantMiniSerializer(read_only=True)
    dish = DishSnapshotSerializer(source="*", read_only=True)
    location = serializers.SerializerMethodField()
    likes = serializers.SerializerMethodField()
    likes_count = serializers.SerializerMethodField()
    comments = CommentSerializer(many=True, read_only=True)

    class Meta:
        model = Post
        fields = [
            "id",
            "user",
            "restaurant",
            "menu_item",
            "dish",
            "image",
            "restaurant_image",
            "location",
            "likes",
            "likes_count",
            "comments",
            "created_at",
            "updated_at",
        ]

    def get_location(self, obj):
        return geo_point(obj)

    def get_likes(self, obj):
        return [like.user_id for like in obj.likes.all()]

    def get_likes_count(self, obj):
        return len(obj.likes.all())


class PostCreateSerializer(serializers.Serializer):
    """Input serializer for authoring a post at an existing restaurant.

    Validates:
    - restaurant_id exists (mapped to 404 by the view if not)
    - dish_name and dish_image are present
    - coordinates come as a pair
    """

    restaurant_id = serializers.IntegerField()
    dish_name = serializers.CharField(max_length=200)
    dish_description = serializers.CharField(required=False, allow_blank=True, default="")
    dish_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )
    tags = CsvListField(required=False, default=list)
    dish_image = serializers.CharField()
    restaurant_image = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)

    def validate_restaurant_id(self, value):
        """Ensure the restaurant exists and store it in the serializer context."""
        try:
            restaurant = Restaurant.objects.get(id=value)
        except Restaurant.DoesNotExist:
            raise serializers.ValidationError("Restaurant not found.")
        self.context["restaurant_obj"] = restaurant
        return value

    def validate_dish_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Dish name must not be blank.")
        return value.strip()

    def validate(self, attrs):
        if (attrs.get("latitude") is None) != (attrs.get("longitude") is None):
            raise serializers.ValidationError(
                {"latitude": "latitude and longitude must be provided together."}
            )
        return attrs

    def _upload_images(self, validated_data):
        request = self.context.get("request")
        dish_url = store_image(validated_data["dish_image"], "dishes", request, field="dish_image")
        restaurant_url = ""
        if validated_data.get("restaurant_image"):
            restaurant_url = store_image(
                validated_data["restaurant_image"], "restaurants", request, field="restaurant_image"
            )
        return dish_url, restaurant_url

    def create(self, validated_data):
        """Upload images, then merge the dish into the menu and create the post."""
        user = self.context["request"].user
        dish_url, restaurant_url = self._upload_images(validated_data)

        with transaction.atomic():
            restaurant = Restaurant.objects.select_for_update().get(pk=self.context["restaurant_obj"].pk)
            menu_item, created = merge_posted_dish(
                restaurant,
                user,
                name=validated_data["dish_name"],
                description=validated_data.get("dish_description", ""),
                price=validated_data.get("dish_price"),
                tags=validated_data.get("tags", []),
                image_url=dish_url,
            )
            restaurant.add_image(restaurant_url)
            restaurant.save()

            post = Post.objects.create(
                user=user,
                restaurant=restaurant,
                menu_item=menu_item,
                dish_name=validated_data["dish_name"],
                dish_description=validated_data.get("dish_description", "") or "",
                dish_price=validated_data.get("dish_price"),
                dish_tags=list(validated_data.get("tags", [])),
                image=dish_url,
                restaurant_image=restaurant_url,
                latitude=validated_data.get("latitude"),
                longitude=validated_data.get("longitude"),
            )
        logger.info(
            "User #%s posted %r at restaurant #%s (%s menu item #%s)",
            user.id, post.dish_name, restaurant.id, "new" if created else "merged into", menu_item.id,
        )
        return post


class CommentCreateSerializer(serializers.Serializer):
    """Input serializer for a comment; text is required."""

    text = serializers.CharField()

    def validate_text(self, value):
        if not value.strip():
            raise serializers.ValidationError("Comment text is required.")
        return value
