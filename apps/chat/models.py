"""Chat domain models.

Each booking carries one message thread between its customer and vendor.
Messages are immutable once posted.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class BookingMessage(models.Model):
    """A single message in a booking's thread."""

    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="messages",
        help_text=_("Booking the thread belongs to"),
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
        help_text=_("Sender (the booking's customer or vendor)"),
    )
    body = models.TextField(help_text=_("Message text"))
    sent_at = models.DateTimeField(default=timezone.now, help_text=_("Time sent"))

    class Meta:
        db_table = "booking_messages"
        verbose_name = _("Message")
        verbose_name_plural = _("Messages")
        ordering = ["sent_at", "id"]
        indexes = [
            models.Index(fields=["booking", "sent_at"], name="booking_msg_booking_sent_idx"),
        ]

    def __str__(self) -> str:
        preview = self.body[:50] + "..." if len(self.body) > 50 else self.body
        return f"Message from {self.sender_id} at {self.sent_at}: {preview}"
