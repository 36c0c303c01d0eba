from django.contrib import admin

from .models import MenuItem, Restaurant, Review


class MenuItemInline(admin.TabularInline):
    model = MenuItem
    extra = 0
    fields = ("name", "price", "category", "description")


class ReviewInline(admin.TabularInline):
    model = Review
    extra = 0
    fields = ("user", "rating", "text", "created_at")
    readonly_fields = ("created_at",)


@admin.register(Restaurant)
class RestaurantAdmin(admin.ModelAdmin):
    """
    Restaurant list with city, rating and price tier.
    The rating is derived from reviews and therefore read-only.
    """
    list_display = ("id", "name", "city", "rating", "price_range", "menu_size", "created_at")
    list_filter = ("price_range", "city")
    search_fields = ("name", "city", "street")
    ordering = ("name", "id")
    readonly_fields = ("rating", "created_at", "updated_at")
    inlines = (MenuItemInline, ReviewInline)

    def menu_size(self, obj):
        return obj.menu_items.count()
    menu_size.short_description = "menu items"


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "restaurant", "price", "category")
    list_select_related = ("restaurant",)
    search_fields = ("name", "restaurant__name")
    filter_horizontal = ("contributors",)
