"""Restaurants API views.

List and create restaurants on the same endpoint, find restaurants near a
point, search them by relevance, retrieve one restaurant with its recent
posts, update it, merge menu items into it and upsert reviews.
"""

import logging

from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.geo import parse_proximity_params, within_radius
from posts.models import Post
from posts.api.serializers import PostSerializer
from restaurants.models import MenuItem, Restaurant, Review
from restaurants.search import search_restaurants
from .permissions import IsAuthenticatedForWrites
from .serializers import (
    MenuItemCreateSerializer,
    RestaurantCreateSerializer,
    RestaurantDetailSerializer,
    RestaurantListSerializer,
    RestaurantSearchSerializer,
    RestaurantUpdateSerializer,
    ReviewCreateSerializer,
)

logger = logging.getLogger(__name__)

RECENT_POSTS_LIMIT = 10


# ----------------------------- helpers (module-level) -----------------------------

def _detail_queryset():
    """Restaurants with menu (contributors, posts) and reviews (users) prefetched."""
    return Restaurant.objects.prefetch_related(
        Prefetch(
            "menu_items",
            queryset=MenuItem.objects.prefetch_related("contributors", "posts"),
        ),
        Prefetch(
            "reviews",
            queryset=Review.objects.select_related("user", "user__profile"),
        ),
    )


def _detail_response(restaurant_id, request, status_code=status.HTTP_200_OK):
    restaurant = _detail_queryset().get(pk=restaurant_id)
    data = RestaurantDetailSerializer(restaurant, context={"request": request}).data
    return Response(data, status=status_code)


def _recent_posts(restaurant):
    return (
        Post.objects.filter(restaurant=restaurant)
        .select_related("user", "user__profile", "restaurant")
        .prefetch_related("likes", "comments__user__profile")
        .order_by("-created_at", "-id")[:RECENT_POSTS_LIMIT]
    )


# --------------------------------------- views ---------------------------------------

class RestaurantListCreateAPIView(generics.ListCreateAPIView):
    """GET: paginated list ordered by name. POST: create restaurant (auth)."""

    queryset = Restaurant.objects.all().order_by("name", "id")

    def get_permissions(self):
        """Listing is public; creation needs an authenticated user."""
        if self.request.method == "POST":
            return [IsAuthenticated()]
        return []

    def get_serializer_class(self):
        """Use list serializer for GET and creation serializer for POST."""
        return RestaurantListSerializer if self.request.method == "GET" else RestaurantCreateSerializer

    def create(self, request, *args, **kwargs):
        """Validate (409 with the existing record on duplicates) and create."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        restaurant = serializer.save()
        logger.info("Created restaurant #%s (%s)", restaurant.id, restaurant.name)
        return _detail_response(restaurant.id, request, status.HTTP_201_CREATED)


class RestaurantNearbyAPIView(generics.ListAPIView):
    """GET /api/restaurants/nearby/?latitude&longitude&radius (km), ordered by name."""

    serializer_class = RestaurantListSerializer

    def get_queryset(self):
        latitude, longitude, radius_km = parse_proximity_params(self.request.query_params)
        return within_radius(
            Restaurant.objects.all().order_by("name", "id"), latitude, longitude, radius_km
        )


class RestaurantSearchAPIView(generics.ListAPIView):
    """GET /api/restaurants/search/?query= -> relevance-ranked, paginated."""

    serializer_class = RestaurantSearchSerializer

    def get_queryset(self):
        return search_restaurants(self.request.query_params.get("query"))


class RestaurantRetrieveUpdateAPIView(APIView):
    """GET: restaurant with its recent posts. PUT: field-level update (auth)."""

    permission_classes = [IsAuthenticatedForWrites]

    def get(self, request, pk):
        restaurant = get_object_or_404(_detail_queryset(), pk=pk)
        data = {
            "restaurant": RestaurantDetailSerializer(restaurant, context={"request": request}).data,
            "recent_posts": PostSerializer(
                _recent_posts(restaurant), many=True, context={"request": request}
            ).data,
        }
        return Response(data, status=status.HTTP_200_OK)

    def put(self, request, pk):
        restaurant = get_object_or_404(Restaurant, pk=pk)
        serializer = RestaurantUpdateSerializer(
            restaurant, data=request.data, partial=True, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return _detail_response(restaurant.id, request)


class MenuItemCreateAPIView(APIView):
    """POST /api/restaurants/{id}/menu/ -> add or merge a menu item (auth)."""

    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        restaurant = get_object_or_404(Restaurant, pk=pk)
        serializer = MenuItemCreateSerializer(
            data=request.data, context={"request": request, "restaurant": restaurant}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        code = status.HTTP_201_CREATED if serializer.created else status.HTTP_200_OK
        return _detail_response(restaurant.id, request, code)


class ReviewCreateAPIView(APIView):
    """POST /api/restaurants/{id}/reviews/ -> add or overwrite own review (auth)."""

    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        restaurant = get_object_or_404(Restaurant, pk=pk)
        serializer = ReviewCreateSerializer(
            data=request.data, context={"request": request, "restaurant": restaurant}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return _detail_response(restaurant.id, request)
