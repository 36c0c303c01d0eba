"""Geo-proximity helpers.

Rows carry a plain ``latitude``/``longitude`` pair. A proximity query first
narrows candidates with a bounding box in the database and then keeps only
rows whose geodesic distance to the centre is within the radius.
"""

import math

from django.db.models import Q
from geopy.distance import geodesic
from rest_framework.exceptions import ValidationError

KM_PER_DEGREE_LATITUDE = 111.32
DEFAULT_RADIUS_KM = 5.0


def _parse_float(params, key: str, required: bool = True, default=None):
    raw = params.get(key)
    if raw in (None, ""):
        if required:
            raise ValidationError({key: "This query parameter is required."})
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValidationError({key: "Must be a number."})


def parse_proximity_params(params):
    """Return ``(latitude, longitude, radius_km)`` from query parameters."""
    latitude = _parse_float(params, "latitude")
    longitude = _parse_float(params, "longitude")
    radius_km = _parse_float(params, "radius", required=False, default=DEFAULT_RADIUS_KM)

    if not -90 <= latitude <= 90:
        raise ValidationError({"latitude": "Must be between -90 and 90."})
    if not -180 <= longitude <= 180:
        raise ValidationError({"longitude": "Must be between -180 and 180."})
    if radius_km <= 0:
        raise ValidationError({"radius": "Must be greater than 0."})
    return latitude, longitude, radius_km


def bounding_box_filter(latitude: float, longitude: float, radius_km: float) -> Q:
    """Coarse database prefilter covering every point within ``radius_km``."""
    lat_delta = radius_km / KM_PER_DEGREE_LATITUDE
    q = Q(
        latitude__isnull=False,
        longitude__isnull=False,
        latitude__gte=latitude - lat_delta,
        latitude__lte=latitude + lat_delta,
    )

    cos_lat = math.cos(math.radians(latitude))
    if cos_lat < 1e-6:
        return q
    lon_delta = radius_km / (KM_PER_DEGREE_LATITUDE * cos_lat)
    # Box crosses the antimeridian: latitude band only.
    if longitude - lon_delta < -180 or longitude + lon_delta > 180:
        return q
    return q & Q(longitude__gte=longitude - lon_delta, longitude__lte=longitude + lon_delta)


def within_radius(queryset, latitude: float, longitude: float, radius_km: float) -> list:
    """Rows of ``queryset`` within ``radius_km`` of the centre, order preserved."""
    max_distance_m = radius_km * 1000
    centre = (latitude, longitude)
    candidates = queryset.filter(bounding_box_filter(latitude, longitude, radius_km))
    return [
        obj for obj in candidates
        if geodesic(centre, (obj.latitude, obj.longitude)).meters <= max_distance_m
    ]


def geo_point(obj):
    """GeoJSON-style point ``[longitude, latitude]`` for a located row, else None."""
    if obj.latitude is None or obj.longitude is None:
        return None
    return {"type": "Point", "coordinates": [obj.longitude, obj.latitude]}
