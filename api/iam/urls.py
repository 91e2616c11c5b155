"""iam URL Configuration"""

from django.urls import path

from .api import api, health

urlpatterns = [
    path("health/", health, {}, "health-check"),
    path("api/", api.urls),
]
