from django.urls import path
from .views import (
    FollowingFeedAPIView,
    NearbyPostsAPIView,
    PostCommentCreateAPIView,
    PostLikeAPIView,
    PostListCreateAPIView,
    PostRetrieveDestroyAPIView,
)

urlpatterns = [
    path("posts/", PostListCreateAPIView.as_view(), name="post-list"),
    path("posts/feed/", FollowingFeedAPIView.as_view(), name="post-feed"),
    path("posts/nearby/", NearbyPostsAPIView.as_view(), name="post-nearby"),
    path("posts/<int:pk>/", PostRetrieveDestroyAPIView.as_view(), name="post-detail"),
    path("posts/<int:pk>/like/", PostLikeAPIView.as_view(), name="post-like"),
    path("posts/<int:pk>/comments/", PostCommentCreateAPIView.as_view(), name="post-comments"),
]
