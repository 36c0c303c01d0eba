"""Root URL configuration.

Every app exposes its endpoints from ``<app>/api/urls.py``; all of them are
mounted below ``/api/``. Uploaded media is served by Django only in DEBUG.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("user_auth_app.api.urls")),
    path("api/", include("posts.api.urls")),
    path("api/", include("restaurants.api.urls")),
    path("api/", include("profiles.api.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
