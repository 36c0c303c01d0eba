import shutil
import tempfile

from django.contrib.auth import get_user_model
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient
from rest_framework.authtoken.models import Token

from profiles.models import Profile

User = get_user_model()

class ProfileUpdateTests(APITestCase):
    def setUp(self):
        media_dir = tempfile.mkdtemp()
        media = override_settings(MEDIA_ROOT=media_dir)
        media.enable()
        self.addCleanup(media.disable)
        self.addCleanup(shutil.rmtree, media_dir, ignore_errors=True)

        self.user = User.objects.create_user(username="owner", email="owner@mail.de", password="Pass123!")
        User.objects.create_user(username="other", email="other@mail.de", password="Pass123!")

        self.client_owner = APIClient()
        self.client_owner.credentials(HTTP_AUTHORIZATION="Bearer " + Token.objects.create(user=self.user).key)
        self.url = reverse("profile-update")

    def test_update_bio_and_username(self):
        resp = self.client_owner.put(self.url, {"username": "newname", "bio": "Hungry"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["username"], "newname")
        self.assertEqual(resp.data["bio"], "Hungry")
        self.assertEqual(resp.data["email"], "owner@mail.de")

        self.user.refresh_from_db()
        self.assertEqual(self.user.username, "newname")
        self.assertEqual(Profile.objects.get(user=self.user).bio, "Hungry")

    def test_picture_url_kept_as_is(self):
        resp = self.client_owner.put(self.url, {"profile_picture": "https://cdn.example.com/me.png"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["profile_picture"], "https://cdn.example.com/me.png")

    def test_picture_base64_is_uploaded(self):
        resp = self.client_owner.put(self.url, {"profile_picture": "aGVsbG8gd29ybGQ="}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data["profile_picture"].startswith("http://testserver/media/profile-pictures/"))

    def test_taken_username_409(self):
        resp = self.client_owner.put(self.url, {"username": "OTHER"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.user.refresh_from_db()
        self.assertEqual(self.user.username, "owner")

    def test_taken_email_409(self):
        resp = self.client_owner.put(self.url, {"email": "other@mail.de"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["kind"], "conflict")

    def test_keeping_own_username_is_fine(self):
        resp = self.client_owner.put(self.url, {"username": "owner", "bio": "same"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

    def test_requires_auth(self):
        resp = APIClient().put(self.url, {"bio": "x"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
