"""Media ingestion.

Images arrive as base64 strings (optionally as ``data:image/...;base64,``
URLs), are written through Django's ``default_storage`` under a folder and
come back as a public URL.
"""

import base64
import binascii
import logging
import re
import uuid

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from rest_framework import serializers

from common.api.exceptions import MediaUploadError

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = re.compile(r"^data:image/(?P<ext>[\w.+-]+);base64,")
_EXTENSIONS = {"jpeg": ".jpg", "jpg": ".jpg", "png": ".png", "webp": ".webp", "gif": ".gif"}


def is_remote_url(value) -> bool:
    return isinstance(value, str) and value.startswith(("http://", "https://"))


def decode_image(data: str, field: str = "image"):
    """Return ``(bytes, extension)`` for a base64 image or raise ValidationError."""
    if not isinstance(data, str) or not data.strip():
        raise serializers.ValidationError({field: "Image data must be a non-empty base64 string."})

    ext = ".jpg"
    match = _DATA_URL_PREFIX.match(data)
    if match:
        ext = _EXTENSIONS.get(match.group("ext").lower(), ".jpg")
        data = data[match.end():]

    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise serializers.ValidationError({field: "Image data is not valid base64."})
    if not raw:
        raise serializers.ValidationError({field: "Image data is empty."})
    if len(raw) > settings.MAX_IMAGE_UPLOAD_BYTES:
        raise serializers.ValidationError({field: "Image too large."})
    return raw, ext


def _public_url(request, saved_path: str) -> str:
    url = default_storage.url(saved_path)
    return request.build_absolute_uri(url) if request is not None else url


def store_image(data: str, folder: str, request=None, field: str = "image") -> str:
    """Persist a base64 image under ``folder`` and return its public URL.

    Storage failures surface as MediaUploadError; nothing is retried.
    """
    raw, ext = decode_image(data, field)
    path = f"{folder}/{uuid.uuid4().hex}{ext}"
    try:
        saved_path = default_storage.save(path, ContentFile(raw))
    except OSError as exc:
        logger.error("Storing %s failed: %s", path, exc)
        raise MediaUploadError() from exc

    logger.info("Stored image %s (%d bytes)", saved_path, len(raw))
    return _public_url(request, saved_path)
