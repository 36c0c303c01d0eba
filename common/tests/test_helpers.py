from unittest import mock

from django.db import IntegrityError, OperationalError
from django.test import SimpleTestCase, override_settings
from rest_framework import serializers
from rest_framework.exceptions import NotFound, ValidationError

from common.api.exceptions import Conflict, MediaUploadError, structured_exception_handler
from common.geo import bounding_box_filter, geo_point, parse_proximity_params
from common.media import decode_image, store_image
from common.text import merge_unique, split_csv


class SplitCsvTests(SimpleTestCase):
    def test_trims_and_drops_empty_segments(self):
        self.assertEqual(split_csv(" spicy , ,vegan,, "), ["spicy", "vegan"])

    def test_accepts_list_and_empty_input(self):
        self.assertEqual(split_csv([" a ", "", "b"]), ["a", "b"])
        self.assertEqual(split_csv(""), [])
        self.assertEqual(split_csv(None), [])

    def test_merge_unique_keeps_order(self):
        self.assertEqual(merge_unique(["a", "b"], ["b", "c"]), ["a", "b", "c"])


class ProximityParamsTests(SimpleTestCase):
    def test_default_radius(self):
        self.assertEqual(parse_proximity_params({"latitude": "1.5", "longitude": "2"}), (1.5, 2.0, 5.0))

    def test_rejects_non_numbers_and_ranges(self):
        for params in (
            {"latitude": "abc", "longitude": "2"},
            {"latitude": "91", "longitude": "2"},
            {"latitude": "1", "longitude": "-181"},
            {"latitude": "1", "longitude": "2", "radius": "-1"},
            {"longitude": "2"},
        ):
            with self.assertRaises(ValidationError):
                parse_proximity_params(params)

    def test_antimeridian_box_is_latitude_band_only(self):
        q = bounding_box_filter(0.0, 179.99, 5)
        self.assertNotIn("longitude__gte", str(q))

    def test_geo_point(self):
        obj = mock.Mock(latitude=10.0, longitude=20.0)
        self.assertEqual(geo_point(obj), {"type": "Point", "coordinates": [20.0, 10.0]})
        self.assertIsNone(geo_point(mock.Mock(latitude=None, longitude=20.0)))


class MediaTests(SimpleTestCase):
    def test_decode_data_url_extension(self):
        raw, ext = decode_image("data:image/png;base64,aGVsbG8gd29ybGQ=")
        self.assertEqual(raw, b"hello world")
        self.assertEqual(ext, ".png")

    def test_decode_rejects_invalid_and_empty(self):
        for data in ("", "***", None):
            with self.assertRaises(serializers.ValidationError):
                decode_image(data)

    @override_settings(MAX_IMAGE_UPLOAD_BYTES=4)
    def test_decode_rejects_too_large(self):
        with self.assertRaises(serializers.ValidationError):
            decode_image("aGVsbG8gd29ybGQ=")

    def test_storage_failure_raises_upload_error(self):
        with mock.patch("common.media.default_storage.save", side_effect=OSError("boom")):
            with self.assertRaises(MediaUploadError):
                store_image("aGVsbG8gd29ybGQ=", "dishes")

    def test_store_returns_storage_url(self):
        with mock.patch("common.media.default_storage") as storage:
            storage.save.return_value = "dishes/abc.jpg"
            storage.url.return_value = "/media/dishes/abc.jpg"
            self.assertEqual(store_image("aGVsbG8gd29ybGQ=", "dishes"), "/media/dishes/abc.jpg")
        path = storage.save.call_args[0][0]
        self.assertTrue(path.startswith("dishes/") and path.endswith(".jpg"))


class ExceptionHandlerTests(SimpleTestCase):
    context = {"view": None}

    def test_validation_error_shape(self):
        resp = structured_exception_handler(ValidationError({"name": ["Required."]}), self.context)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data, {"kind": "validation", "message": "Required.", "errors": {"name": ["Required."]}})

    def test_not_found_shape(self):
        resp = structured_exception_handler(NotFound("Post not found."), self.context)
        self.assertEqual(resp.data, {"kind": "not_found", "message": "Post not found."})

    def test_conflict_carries_data(self):
        resp = structured_exception_handler(Conflict("Exists.", data={"id": 1}), self.context)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.data, {"kind": "conflict", "message": "Exists.", "data": {"id": 1}})

    def test_upload_error_is_upstream(self):
        resp = structured_exception_handler(MediaUploadError(), self.context)
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.data["kind"], "upstream")

    def test_database_error_is_503(self):
        resp = structured_exception_handler(OperationalError("locked"), self.context)
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.data["kind"], "upstream")

    def test_integrity_error_is_conflict(self):
        resp = structured_exception_handler(IntegrityError("UNIQUE constraint failed"), self.context)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.data, {"kind": "conflict", "message": "Resource already exists."})

    def test_unhandled_exception_passes_through(self):
        self.assertIsNone(structured_exception_handler(RuntimeError("x"), self.context))
