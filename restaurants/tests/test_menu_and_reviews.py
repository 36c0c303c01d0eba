from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient, APITestCase

from restaurants.models import MenuItem, Restaurant, Review

User = get_user_model()


def _client_for(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION="Bearer " + Token.objects.create(user=user).key)
    return client


class MenuItemTests(APITestCase):
    def setUp(self):
        self.alice = User.objects.create_user("alice", "alice@mail.de", "Pass123!")
        self.bob = User.objects.create_user("bob", "bob@mail.de", "Pass123!")
        self.restaurant = Restaurant.objects.create(name="Noodle Bar")
        self.url = reverse("restaurant-menu", kwargs={"pk": self.restaurant.id})

    def test_add_new_item_201(self):
        resp = _client_for(self.alice).post(
            self.url, {"name": "Ramen", "price": "11.00", "tags": "soup, pork"}, format="json"
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        menu = resp.data["menu"]
        self.assertEqual(len(menu), 1)
        self.assertEqual(menu[0]["category"], MenuItem.DEFAULT_CATEGORY)
        self.assertEqual(menu[0]["tags"], ["soup", "pork"])
        self.assertEqual(menu[0]["contributors"], [self.alice.id])

    def test_same_name_other_case_merges_200(self):
        _client_for(self.alice).post(self.url, {"name": "Ramen", "tags": "soup"}, format="json")
        resp = _client_for(self.bob).post(
            self.url,
            {"name": "RAMEN", "description": "Rich broth", "category": "Mains", "tags": "soup,spicy"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

        item = MenuItem.objects.get(restaurant=self.restaurant)
        self.assertEqual(item.name, "Ramen")
        self.assertEqual(item.description, "Rich broth")
        self.assertEqual(item.category, "Mains")
        self.assertEqual(item.tags, ["soup", "spicy"])
        self.assertEqual(set(item.contributors.all()), {self.alice, self.bob})

    def test_blank_name_400(self):
        resp = _client_for(self.alice).post(self.url, {"name": "  "}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("name", resp.data["errors"])

    def test_unknown_restaurant_404(self):
        url = reverse("restaurant-menu", kwargs={"pk": 9999})
        resp = _client_for(self.alice).post(url, {"name": "Ramen"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_auth(self):
        resp = self.client.post(self.url, {"name": "Ramen"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)


class ReviewTests(APITestCase):
    def setUp(self):
        self.restaurant = Restaurant.objects.create(name="Steak House")
        self.url = reverse("restaurant-reviews", kwargs={"pk": self.restaurant.id})
        self.users = [
            User.objects.create_user(f"user{i}", f"user{i}@mail.de", "Pass123!") for i in range(3)
        ]

    def test_rating_is_mean_of_reviews(self):
        for user, rating in zip(self.users, [4, 5, 3]):
            resp = _client_for(user).post(self.url, {"rating": rating, "text": "ok"}, format="json")
            self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["rating"], 4.0)
        self.assertEqual(len(resp.data["reviews"]), 3)

    def test_second_review_overwrites_first(self):
        client = _client_for(self.users[0])
        client.post(self.url, {"rating": 2, "text": "meh"}, format="json")
        resp = client.post(self.url, {"rating": 5, "text": "better now"}, format="json")
        self.assertEqual(Review.objects.filter(restaurant=self.restaurant).count(), 1)
        self.assertEqual(resp.data["rating"], 5.0)
        self.assertEqual(resp.data["reviews"][0]["text"], "better now")

    def test_resubmission_recomputes_mean_over_current_reviews(self):
        clients = [_client_for(user) for user in self.users]
        for client, rating in zip(clients, [4, 5, 3]):
            client.post(self.url, {"rating": rating}, format="json")
        self.restaurant.refresh_from_db()
        self.assertEqual(self.restaurant.rating, 4.0)

        resp = clients[0].post(self.url, {"rating": 1, "text": "changed my mind"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data["reviews"]), 3)
        self.assertEqual(resp.data["rating"], 3.0)
        self.assertEqual(Review.objects.filter(restaurant=self.restaurant).count(), 3)

    def test_rating_out_of_range_400(self):
        resp = _client_for(self.users[0]).post(self.url, {"rating": 6}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("rating", resp.data["errors"])
        self.restaurant.refresh_from_db()
        self.assertEqual(self.restaurant.rating, 0)

    def test_requires_auth(self):
        resp = self.client.post(self.url, {"rating": 4}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
