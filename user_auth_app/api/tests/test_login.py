from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient
from rest_framework.authtoken.models import Token

User = get_user_model()

class LoginTests(APITestCase):
    def setUp(self):
        self.url = reverse("login")
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="exampleUsername",
            email="example@mail.de",
            password="examplePassword",
        )

    def test_login_success(self):
        resp = self.client.post(
            self.url,
            {"email": "example@mail.de", "password": "examplePassword"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["user_id"], self.user.id)
        self.assertEqual(resp.data["username"], "exampleUsername")
        self.assertEqual(resp.data["email"], "example@mail.de")
        self.assertEqual(resp.data["token"], Token.objects.get(user=self.user).key)

    def test_login_email_is_case_insensitive(self):
        resp = self.client.post(
            self.url,
            {"email": "EXAMPLE@mail.de", "password": "examplePassword"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

    def test_login_reuses_existing_token(self):
        token = Token.objects.create(user=self.user)
        resp = self.client.post(
            self.url,
            {"email": "example@mail.de", "password": "examplePassword"},
            format="json",
        )
        self.assertEqual(resp.data["token"], token.key)

    def test_login_wrong_password_401(self):
        resp = self.client.post(
            self.url,
            {"email": "example@mail.de", "password": "WRONG"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.data["kind"], "authentication")
        self.assertEqual(resp.data["message"], "Invalid credentials.")

    def test_login_unknown_email_401(self):
        resp = self.client.post(
            self.url,
            {"email": "nobody@mail.de", "password": "examplePassword"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_missing_fields_400(self):
        resp = self.client.post(self.url, {"email": "example@mail.de"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password", resp.data["errors"])
