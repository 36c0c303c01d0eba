from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

from profiles.models import Profile
from user_auth_app.api.authentication import issue_token

DEMO_USERS = {
    "foodie": {"email": "foodie@example.com", "password": "Dishfeed-demo-1", "bio": "Always hungry."},
    "critic": {"email": "critic@example.com", "password": "Dishfeed-demo-2", "bio": "Two stars, maybe."},
}


class Command(BaseCommand):
    help = "Create or reset the demo users used by the frontend."

    def handle(self, *args, **options):
        User = get_user_model()

        for username, cfg in DEMO_USERS.items():
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"email": cfg["email"]},
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f"Created user '{u.username}'"))
            else:
                self.stdout.write(f"User '{u.username}' already exists")

            # reset password so the demo login always works
            u.set_password(cfg["password"])
            u.save(update_fields=["password"])

            prof = Profile.for_user(u)
            if prof.bio != cfg["bio"]:
                prof.bio = cfg["bio"]
                prof.save(update_fields=["bio"])

            self.stdout.write(f"  → token={issue_token(u)}")

        self.stdout.write(self.style.SUCCESS("Demo users ready."))
