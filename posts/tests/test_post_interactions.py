from unittest import mock

from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient, APITestCase

from posts.models import Comment, Like, Post
from restaurants.models import Restaurant

User = get_user_model()


class PostInteractionTests(APITestCase):
    def setUp(self):
        self.author = User.objects.create_user("author", "author@mail.de", "Pass123!")
        self.other = User.objects.create_user("other", "other@mail.de", "Pass123!")
        restaurant = Restaurant.objects.create(name="Diner")
        self.post = Post.objects.create(
            user=self.author, restaurant=restaurant, dish_name="Ramen", image="http://x/ramen.jpg"
        )

        self.client_author = APIClient()
        self.client_author.credentials(HTTP_AUTHORIZATION="Bearer " + Token.objects.create(user=self.author).key)
        self.client_other = APIClient()
        self.client_other.credentials(HTTP_AUTHORIZATION="Bearer " + Token.objects.create(user=self.other).key)
        self.client_anon = APIClient()

        self.detail_url = reverse("post-detail", kwargs={"pk": self.post.id})
        self.like_url = reverse("post-like", kwargs={"pk": self.post.id})
        self.comments_url = reverse("post-comments", kwargs={"pk": self.post.id})

    # --- likes ---

    def test_like_then_unlike_restores_state(self):
        first = self.client_other.put(self.like_url)
        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertTrue(first.data["is_liked"])
        self.assertEqual(first.data["likes"], [self.other.id])
        self.assertEqual(first.data["likes_count"], 1)

        second = self.client_other.put(self.like_url)
        self.assertFalse(second.data["is_liked"])
        self.assertEqual(second.data["likes"], [])
        self.assertEqual(Like.objects.filter(post=self.post).count(), 0)

    def test_likes_from_two_users_are_counted_once_each(self):
        self.client_other.put(self.like_url)
        resp = self.client_author.put(self.like_url)
        self.assertEqual(sorted(resp.data["likes"]), sorted([self.author.id, self.other.id]))
        self.assertEqual(resp.data["likes_count"], 2)

    def test_concurrent_duplicate_like_is_conflict(self):
        with mock.patch.object(Like.objects, "create", side_effect=IntegrityError("UNIQUE constraint failed")):
            resp = self.client_other.put(self.like_url)
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["kind"], "conflict")
        self.assertEqual(Like.objects.count(), 0)

    def test_like_requires_auth(self):
        resp = self.client_anon.put(self.like_url)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_like_unknown_post_404(self):
        resp = self.client_other.put(reverse("post-like", kwargs={"pk": 9999}))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["kind"], "not_found")

    # --- comments ---

    def test_add_comment_returns_all_comments(self):
        Comment.objects.create(post=self.post, user=self.author, text="First!")
        resp = self.client_other.post(self.comments_url, {"text": "Looks great"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual([c["text"] for c in resp.data], ["First!", "Looks great"])
        self.assertEqual(resp.data[1]["user"]["username"], "other")

    def test_blank_comment_400(self):
        resp = self.client_other.post(self.comments_url, {"text": "   "}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("text", resp.data["errors"])
        self.assertEqual(Comment.objects.count(), 0)

    def test_comment_requires_auth(self):
        resp = self.client_anon.post(self.comments_url, {"text": "hi"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    # --- retrieve / delete ---

    def test_retrieve_post_public(self):
        Comment.objects.create(post=self.post, user=self.other, text="Yum")
        resp = self.client_anon.get(self.detail_url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["dish"]["name"], "Ramen")
        self.assertEqual(len(resp.data["comments"]), 1)

    def test_retrieve_unknown_post_404(self):
        resp = self.client_anon.get(reverse("post-detail", kwargs={"pk": 9999}))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_author_can_delete(self):
        resp = self.client_author.delete(self.detail_url)
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Post.objects.filter(pk=self.post.id).exists())

    def test_other_user_cannot_delete(self):
        resp = self.client_other.delete(self.detail_url)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.data["kind"], "authorization")
        self.assertTrue(Post.objects.filter(pk=self.post.id).exists())

    def test_anonymous_cannot_delete(self):
        resp = self.client_anon.delete(self.detail_url)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
