"""Posts API views.

Feeds (global, following, nearby) share one pagination scheme and newest-first
ordering. Posts are created on the global endpoint, retrieved and deleted on
the detail route, and liked or commented on dedicated routes.
"""

from django.db import transaction
from rest_framework import generics, status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.geo import parse_proximity_params, within_radius
from posts.models import Comment, Like, Post
from .permissions import IsPostOwner
from .serializers import (
    CommentCreateSerializer,
    CommentSerializer,
    PostCreateSerializer,
    PostSerializer,
)


# ----------------------------- helpers (module-level) -----------------------------

def _post_queryset():
    """Posts newest first with author, restaurant, likes and comments loaded."""
    return (
        Post.objects.all()
        .select_related("user", "user__profile", "restaurant")
        .prefetch_related("likes", "comments__user__profile")
        .order_by("-created_at", "-id")
    )


def _following_feed_queryset(user):
    """Posts by ``user`` or by anyone ``user`` follows."""
    author_ids = list(user.following_set.values_list("followed_id", flat=True))
    author_ids.append(user.id)
    return _post_queryset().filter(user_id__in=author_ids)


def _map_restaurant_not_found(exc: ValidationError):
    """Raise NotFound if the validation error reports a missing restaurant."""
    detail = exc.detail
    if isinstance(detail, dict) and "restaurant_id" in detail:
        msgs = detail["restaurant_id"]
        if not isinstance(msgs, (list, tuple)):
            msgs = [msgs]
        if any("not found" in str(m).lower() for m in msgs):
            raise NotFound("Restaurant not found.")


def _get_post_or_404(pk):
    try:
        return Post.objects.get(pk=pk)
    except Post.DoesNotExist:
        raise NotFound("Post not found.")


# --------------------------------------- views ---------------------------------------

class PostListCreateAPIView(generics.ListCreateAPIView):
    """GET: global feed, newest first. POST: author a post (auth)."""

    def get_permissions(self):
        """Creation requires authentication; the global feed is public."""
        if self.request.method == "POST":
            return [IsAuthenticated()]
        return []

    def get_serializer_class(self):
        """Use output serializer for GET and input serializer for POST."""
        return PostSerializer if self.request.method == "GET" else PostCreateSerializer

    def get_queryset(self):
        return _post_queryset()

    def create(self, request, *args, **kwargs):
        """Validate and create a post, returning the full post payload."""
        serializer = self.get_serializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except ValidationError as exc:
            _map_restaurant_not_found(exc)
            raise
        post = serializer.save()
        data = PostSerializer(_post_queryset().get(pk=post.pk), context={"request": request}).data
        return Response(data, status=status.HTTP_201_CREATED)


class FollowingFeedAPIView(generics.ListAPIView):
    """GET /api/posts/feed/ -> posts by the requester and the users they follow."""

    serializer_class = PostSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return _following_feed_queryset(self.request.user)


class NearbyPostsAPIView(generics.ListAPIView):
    """GET /api/posts/nearby/?latitude&longitude&radius (km), newest first."""

    serializer_class = PostSerializer

    def get_queryset(self):
        latitude, longitude, radius_km = parse_proximity_params(self.request.query_params)
        return within_radius(_post_queryset(), latitude, longitude, radius_km)


class PostRetrieveDestroyAPIView(generics.RetrieveDestroyAPIView):
    """GET: retrieve a post with comments. DELETE: author only."""

    serializer_class = PostSerializer

    def get_queryset(self):
        return _post_queryset()

    def get_permissions(self):
        """Deleting needs the authenticated author; reads are public."""
        if self.request.method == "DELETE":
            return [IsAuthenticated(), IsPostOwner()]
        return []

    def destroy(self, request, *args, **kwargs):
        """Delete the post (author only) and respond with 204 No Content."""
        instance = self.get_object()
        self.perform_destroy(instance)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PostLikeAPIView(APIView):
    """PUT /api/posts/{id}/like/ -> toggle the requester's like."""

    permission_classes = [IsAuthenticated]

    def put(self, request, pk):
        post = _get_post_or_404(pk)
        with transaction.atomic():
            deleted, _ = Like.objects.filter(post=post, user=request.user).delete()
            liked = not deleted
            if liked:
                Like.objects.create(post=post, user=request.user)
            likes = list(post.likes.order_by("id").values_list("user_id", flat=True))
        return Response(
            {
                "is_liked": liked,
                "likes": likes,
                "likes_count": len(likes),
                "message": "Post liked" if liked else "Post unliked",
            },
            status=status.HTTP_200_OK,
        )


class PostCommentCreateAPIView(APIView):
    """POST /api/posts/{id}/comments/ -> append a comment, return all comments."""

    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        post = _get_post_or_404(pk)
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        Comment.objects.create(post=post, user=request.user, text=serializer.validated_data["text"])

        comments = post.comments.select_related("user", "user__profile").order_by("created_at", "id")
        return Response(CommentSerializer(comments, many=True).data, status=status.HTTP_201_CREATED)
