from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

User = get_user_model()

# Re-register the stock user admin with social-graph columns.
try:
    admin.site.unregister(User)
except admin.sites.NotRegistered:
    pass


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """
    User list with id, follower/following counts and admin flags.
    """
    list_display = (
        "id",
        "username",
        "email",
        "follower_count",
        "following_count",
        "is_staff",
        "is_active",
        "date_joined",
        "last_login",
    )
    list_select_related = ("profile",)
    ordering = ("-date_joined", "-id")
    search_fields = ("username", "email")
    list_filter = ("is_staff", "is_superuser", "is_active")

    def follower_count(self, obj):
        return obj.follower_set.count()
    follower_count.short_description = "followers"

    def following_count(self, obj):
        return obj.following_set.count()
    following_count.short_description = "following"
