"""URL routing for the availability calendar."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AvailabilitySlotViewSet

router = DefaultRouter()
router.register(r"slots", AvailabilitySlotViewSet, basename="availability-slot")

urlpatterns = [
    path("", include(router.urls)),
]
