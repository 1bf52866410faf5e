"""Service catalog models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Service(models.Model):
    """A bookable offering published by a vendor (e.g. "Wedding photography")."""

    vendor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="services",
        limit_choices_to={"role": "vendor"},
    )
    name = models.CharField(_("Name"), max_length=255)
    description = models.TextField(_("Description"), blank=True)
    base_price = models.DecimalField(
        _("Base price"),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "catalog_services"
        verbose_name = _("Service")
        verbose_name_plural = _("Services")
        ordering = ["name"]
        indexes = [models.Index(fields=["vendor", "is_active"], name="catalog_svc_vendor_active_idx")]

    def __str__(self) -> str:
        return f"{self.name} ({self.vendor_id})"
