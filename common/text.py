"""Small text helpers shared by the authoring serializers."""


def split_csv(value) -> list:
    """Split a comma-separated string into trimmed, non-empty segments.

    A list is accepted as well (JSON clients); its items are trimmed the same
    way. ``None`` and empty input yield an empty list.
    """
    if not value:
        return []
    items = value if isinstance(value, (list, tuple)) else str(value).split(",")
    return [s for s in (str(item).strip() for item in items) if s]


def merge_unique(existing: list, additions) -> list:
    """Append items of ``additions`` missing from ``existing`` (order kept)."""
    merged = list(existing or [])
    for item in additions or []:
        if item not in merged:
            merged.append(item)
    return merged
