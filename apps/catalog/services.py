"""Read-only catalog lookups used by the booking engine."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from shared.domain.base import ValueObject
from shared.domain.exceptions import NotFoundError

from .models import Service


@dataclass(frozen=True)
class ServiceInfo(ValueObject):
    id: int
    vendor_id: int
    name: str
    base_price: Decimal


def lookup_service(service_id: int) -> ServiceInfo:
    """Resolve an active service, raising NotFoundError otherwise."""

    try:
        service = Service.objects.get(pk=service_id, is_active=True)
    except Service.DoesNotExist:
        raise NotFoundError.for_field("service_id", f"Service {service_id} not found.") from None
    return ServiceInfo(
        id=service.pk,
        vendor_id=service.vendor_id,
        name=service.name,
        base_price=service.base_price,
    )
