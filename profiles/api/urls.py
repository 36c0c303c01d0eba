from django.urls import path
from .views import (
    FavoriteToggleAPIView,
    FollowersListAPIView,
    FollowingListAPIView,
    FollowToggleAPIView,
    ProfileUpdateAPIView,
    UserProfileAPIView,
    UserSearchAPIView,
)

urlpatterns = [
    path("users/search/", UserSearchAPIView.as_view(), name="user-search"),
    path("users/profile/", ProfileUpdateAPIView.as_view(), name="profile-update"),
    path("users/favorites/<int:restaurant_id>/", FavoriteToggleAPIView.as_view(), name="favorite-toggle"),
    path("users/<int:pk>/", UserProfileAPIView.as_view(), name="user-profile"),
    path("users/<int:pk>/follow/", FollowToggleAPIView.as_view(), name="user-follow"),
    path("users/<int:pk>/followers/", FollowersListAPIView.as_view(), name="user-followers"),
    path("users/<int:pk>/following/", FollowingListAPIView.as_view(), name="user-following"),
]
