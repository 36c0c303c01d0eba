"""Relevance-ranked restaurant search over name, menu item names and cuisine.

Matching runs on casefolded text only: ``Restaurant.search_text`` (name and
cuisine) and ``MenuItem.name_key`` in the database, ``str.casefold`` when
scoring. The JSON text of ``cuisine`` is never queried.
"""

from django.db.models import Q
from rest_framework.exceptions import ValidationError

from .models import Restaurant, casefold_key


def search_terms(query) -> list:
    """Case-folded, de-duplicated whitespace terms of ``query``."""
    terms = []
    for term in casefold_key(query).split():
        if term not in terms:
            terms.append(term)
    if not terms:
        raise ValidationError({"query": "A non-empty search query is required."})
    return terms


def _matching_filter(terms) -> Q:
    q = Q()
    for term in terms:
        q |= Q(search_text__contains=term) | Q(menu_items__name_key__contains=term)
    return q


def relevance(restaurant, terms) -> float:
    """Number of term occurrences across name, menu item names and cuisine."""
    fields = [casefold_key(restaurant.name)]
    fields += [casefold_key(item.name) for item in restaurant.menu_items.all()]
    fields += [casefold_key(c) for c in restaurant.cuisine]
    return float(sum(field.count(term) for term in terms for field in fields))


def search_restaurants(query) -> list:
    """Restaurants matching any term, best score first (ties by name).

    Each returned restaurant carries its ``score`` attribute.
    """
    terms = search_terms(query)
    candidates = (
        Restaurant.objects.filter(_matching_filter(terms))
        .distinct()
        .prefetch_related("menu_items")
    )
    ranked = []
    for restaurant in candidates:
        restaurant.score = relevance(restaurant, terms)
        if restaurant.score > 0:
            ranked.append(restaurant)
    ranked.sort(key=lambda r: (-r.score, casefold_key(r.name), r.pk))
    return ranked
