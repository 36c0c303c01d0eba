from django.contrib import admin
from .models import Follow, Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """
    Profile list with its own id and the related user id.
    """
    list_display = ("id", "user_id_display", "user", "favorite_count", "created_at")
    list_select_related = ("user",)
    search_fields = ("user__username", "user__email", "bio")
    list_filter = ("created_at",)
    ordering = ("-created_at", "-id")
    autocomplete_fields = ("user",)
    filter_horizontal = ("favorite_restaurants",)
    readonly_fields = ("created_at",)

    def user_id_display(self, obj):
        return obj.user_id
    user_id_display.short_description = "user id"
    user_id_display.admin_order_field = "user__id"

    def favorite_count(self, obj):
        return obj.favorite_restaurants.count()
    favorite_count.short_description = "favorites"


@admin.register(Follow)
class FollowAdmin(admin.ModelAdmin):
    list_display = ("id", "follower", "followed", "created_at")
    list_select_related = ("follower", "followed")
    search_fields = ("follower__username", "followed__username")
    ordering = ("-created_at", "-id")
    readonly_fields = ("created_at",)
