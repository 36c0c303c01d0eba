from django.db import migrations, models


def _key(value):
    return str(value or "").strip().casefold()


def fill_casefold_keys(apps, schema_editor):
    Restaurant = apps.get_model("restaurants", "Restaurant")
    MenuItem = apps.get_model("restaurants", "MenuItem")

    for restaurant in Restaurant.objects.all():
        parts = [_key(p) for p in [restaurant.name, *(restaurant.cuisine or [])]]
        restaurant.search_text = " ".join(p for p in parts if p)
        restaurant.save(update_fields=["search_text"])

    for item in MenuItem.objects.all():
        item.name_key = _key(item.name)
        item.save(update_fields=["name_key"])


class Migration(migrations.Migration):

    dependencies = [
        ("restaurants", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="restaurant",
            name="search_text",
            field=models.TextField(blank=True, default="", editable=False),
        ),
        migrations.AddField(
            model_name="menuitem",
            name="name_key",
            field=models.CharField(default="", editable=False, max_length=255),
            preserve_default=False,
        ),
        migrations.RemoveConstraint(
            model_name="menuitem",
            name="unique_menu_item_name_per_restaurant",
        ),
        migrations.RunPython(fill_casefold_keys, migrations.RunPython.noop),
        migrations.AddConstraint(
            model_name="menuitem",
            constraint=models.UniqueConstraint(
                fields=("restaurant", "name_key"), name="unique_menu_item_name_per_restaurant"
            ),
        ),
    ]
