from django.urls import path
from .views import (
    MenuItemCreateAPIView,
    RestaurantListCreateAPIView,
    RestaurantNearbyAPIView,
    RestaurantRetrieveUpdateAPIView,
    RestaurantSearchAPIView,
    ReviewCreateAPIView,
)

urlpatterns = [
    path("restaurants/", RestaurantListCreateAPIView.as_view(), name="restaurant-list"),
    path("restaurants/nearby/", RestaurantNearbyAPIView.as_view(), name="restaurant-nearby"),
    path("restaurants/search/", RestaurantSearchAPIView.as_view(), name="restaurant-search"),
    path("restaurants/<int:pk>/", RestaurantRetrieveUpdateAPIView.as_view(), name="restaurant-detail"),
    path("restaurants/<int:pk>/menu/", MenuItemCreateAPIView.as_view(), name="restaurant-menu"),
    path("restaurants/<int:pk>/reviews/", ReviewCreateAPIView.as_view(), name="restaurant-reviews"),
]
