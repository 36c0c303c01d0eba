"""Menu item merge rules.

A dish is identified inside one restaurant by its name, compared
case-insensitively. Posting or adding a dish that already exists merges into
the existing menu item instead of creating a second one.
"""

import logging

from common.text import merge_unique

from .models import MenuItem, casefold_key

logger = logging.getLogger(__name__)


def find_menu_item(restaurant, name: str):
    """Return the restaurant's menu item called ``name`` (any case) or None."""
    return restaurant.menu_items.filter(name_key=casefold_key(name)).first()


def merge_posted_dish(restaurant, user, *, name, description="", price=None, tags=None, image_url):
    """Fold a posted dish into the restaurant menu.

    A new item is seeded from the dish with ``user`` as sole contributor; an
    existing item gains the dish image and ``user`` as contributor. Returns
    ``(menu_item, created)``. The caller links the post to the item.
    """
    item = find_menu_item(restaurant, name)
    if item is None:
        item = MenuItem.objects.create(
            restaurant=restaurant,
            name=name.strip(),
            description=description or "",
            price=price,
            category=MenuItem.DEFAULT_CATEGORY,
            images=[image_url],
            tags=list(tags or []),
        )
        item.contributors.add(user)
        logger.debug("New menu item %r for restaurant #%s", item.name, restaurant.pk)
        return item, True

    item.images = [*item.images, image_url]
    item.save(update_fields=["images", "updated_at"])
    item.contributors.add(user)
    logger.debug("Merged dish %r into menu item #%s", name, item.pk)
    return item, False


def upsert_menu_item(restaurant, user, *, name, description=None, price=None, category=None,
                     tags=None, image_url=None):
    """Create a menu item or update the existing one with the same name.

    Provided description/price/category overwrite; the image is appended if
    new; tags are unioned. ``user`` always ends up among the contributors.
    Returns ``(menu_item, created)``.
    """
    item = find_menu_item(restaurant, name)
    if item is None:
        item = MenuItem.objects.create(
            restaurant=restaurant,
            name=name.strip(),
            description=description or "",
            price=price,
            category=category or MenuItem.DEFAULT_CATEGORY,
            images=[image_url] if image_url else [],
            tags=list(tags or []),
        )
        item.contributors.add(user)
        return item, True

    if description:
        item.description = description
    if price is not None:
        item.price = price
    if category:
        item.category = category
    if image_url:
        item.images = merge_unique(item.images, [image_url])
    if tags:
        item.tags = merge_unique(item.tags, tags)
    item.save()
    item.contributors.add(user)
    return item, False
