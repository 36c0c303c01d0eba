"""Pagination shared by feeds, restaurant listings and search.

Clients page with ``?page=<n>&limit=<m>`` (1-based). Every response reports
the total match count and ``pages = ceil(total / limit)`` so the client knows
when to stop. A page past the end yields an empty ``results`` list.
"""

import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


def _positive_int(raw, default: int, maximum=None) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < 1:
        return default
    if maximum is not None:
        value = min(value, maximum)
    return value


class FeedPagination(PageNumberPagination):
    """Page/limit pagination with total and page-count accounting."""

    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100

    def paginate_queryset(self, queryset, request, view=None):
        self.request = request
        self.page_number = _positive_int(request.query_params.get(self.page_query_param), 1)
        self.limit = _positive_int(
            request.query_params.get(self.page_size_query_param),
            self.page_size,
            self.max_page_size,
        )
        self.total = queryset.count() if hasattr(queryset, "model") else len(queryset)

        start = (self.page_number - 1) * self.limit
        return list(queryset[start:start + self.limit])

    def get_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    def get_paginated_response(self, data):
        return Response(
            {
                "results": data,
                "pagination": {
                    "page": self.page_number,
                    "limit": self.limit,
                    "total": self.total,
                    "pages": self.get_pages(),
                },
            }
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "results": schema,
                "pagination": {
                    "type": "object",
                    "properties": {
                        "page": {"type": "integer"},
                        "limit": {"type": "integer"},
                        "total": {"type": "integer"},
                        "pages": {"type": "integer"},
                    },
                },
            },
        }
