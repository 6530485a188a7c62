"""ZK attendance gateway URL Configuration

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.1/topics/http/urls/
"""

from django.conf import settings
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from apps.core.constants import API_DOCS_ENVIRONMENTS

urlpatterns = []
urlpatterns += [
    path("health/", include("apps.core.urls")),
    path("api/", include("apps.devices.urls")),
    path("api/", include("apps.attendance.urls")),
]

if settings.ENVIRONMENT in API_DOCS_ENVIRONMENTS:
    urlpatterns += [
        path("schema/", SpectacularAPIView.as_view(), name="schema"),
        path(
            "docs/",
            SpectacularSwaggerView.as_view(url_name="schema"),
            name="swagger-ui",
        ),
    ]
