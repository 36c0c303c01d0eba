from django.contrib import admin

from .models import Comment, Post


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0
    fields = ("user", "text", "created_at")
    readonly_fields = ("created_at",)


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    """
    Post management:
    - List: id, dish, author, restaurant, like count, created
    - The dish fields are a snapshot taken at creation and stay read-only
    """
    list_display = ("id", "dish_name", "author_username", "restaurant", "like_count", "created_at")
    list_select_related = ("user", "restaurant")
    list_filter = ("created_at",)
    date_hierarchy = "created_at"
    ordering = ("-created_at", "-id")
    search_fields = ("dish_name", "user__username", "restaurant__name")
    readonly_fields = (
        "user",
        "restaurant",
        "menu_item",
        "dish_name",
        "dish_description",
        "dish_price",
        "dish_tags",
        "created_at",
        "updated_at",
    )
    inlines = (CommentInline,)

    def author_username(self, obj):
        return obj.user.username if obj.user_id else ""
    author_username.short_description = "author"

    def like_count(self, obj):
        return obj.likes.count()
    like_count.short_description = "likes"
