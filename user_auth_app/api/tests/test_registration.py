from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient
from profiles.models import Profile

User = get_user_model()

class RegistrationTests(APITestCase):
    def setUp(self):
        self.url = reverse("registration")
        self.client = APIClient()

    def test_registration_success(self):
        payload = {
            "username": "exampleUsername",
            "email": "example@mail.de",
            "password": "StrongPassw0rd!",
        }
        resp = self.client.post(self.url, payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertIn("token", resp.data)
        self.assertIn("user_id", resp.data)
        self.assertEqual(resp.data["username"], payload["username"])
        self.assertEqual(resp.data["email"], payload["email"])
        self.assertEqual(resp.data["profile_picture"], "")
        self.assertTrue(User.objects.filter(username=payload["username"]).exists())

    def test_registration_creates_empty_profile(self):
        payload = {"username": "reg_user", "email": "reg@mail.de", "password": "StrongPassw0rd!"}
        resp = self.client.post(self.url, payload, format="json")
        self.assertEqual(resp.status_code, 201)

        prof = Profile.objects.get(user_id=resp.data["user_id"])
        self.assertEqual(prof.bio, "")
        self.assertEqual(prof.favorite_restaurants.count(), 0)

    def test_short_password_400(self):
        payload = {"username": "u2", "email": "u2@mail.de", "password": "abc"}
        resp = self.client.post(self.url, payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["kind"], "validation")
        self.assertIn("password", resp.data["errors"])

    def test_duplicate_username_409(self):
        User.objects.create_user(username="taken", email="t@mail.de", password="abc12345")
        payload = {"username": "Taken", "email": "new@mail.de", "password": "StrongPassw0rd!"}
        resp = self.client.post(self.url, payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["kind"], "conflict")
        self.assertEqual(User.objects.count(), 1)

    def test_duplicate_email_409(self):
        User.objects.create_user(username="u1", email="dup@mail.de", password="abc12345")
        payload = {"username": "u2", "email": "DUP@mail.de", "password": "StrongPassw0rd!"}
        resp = self.client.post(self.url, payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["kind"], "conflict")

    def test_missing_required_fields_400(self):
        resp = self.client.post(self.url, {"username": "x"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        for f in ("email", "password"):
            self.assertIn(f, resp.data["errors"])
