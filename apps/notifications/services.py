"""Notification channels: in-app inbox rows and e-mail.

Each channel raises TransientDependencyError when delivery fails so the
Celery task can retry it.
"""

from __future__ import annotations

import logging
import smtplib
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.db import DatabaseError  # type: ignore

from shared.domain.exceptions import TransientDependencyError

from .models import Notification

if TYPE_CHECKING:  # pragma: no cover
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(recipient_email: str, subject: str, message: str) -> None:
    """Send a plain-text e-mail through Django's mail backend."""

    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            fail_silently=False,
        )
    except (smtplib.SMTPException, OSError) as e:
        logger.warning(f"Failed to send email to {recipient_email}: {e}")
        raise TransientDependencyError(f"E-mail delivery to {recipient_email} failed: {e}") from e

    logger.info(f"Email sent successfully to {recipient_email}: {subject}")


# ============================================================================
# IN-APP NOTIFICATIONS
# ============================================================================

def create_in_app_notification(
    user: "CustomUser",
    event_type: str,
    title: str,
    message: str,
    payload: dict | None = None,
) -> Notification:
    """Store an inbox entry for ``user``."""

    try:
        notification = Notification.objects.create(
            user=user,
            event_type=event_type,
            title=title,
            message=message,
            payload=payload or {},
        )
    except DatabaseError as e:
        logger.warning(f"Failed to create in-app notification for user {user.pk}: {e}")
        raise TransientDependencyError(f"In-app notification for user {user.pk} failed: {e}") from e

    logger.info(f"In-app notification created for user {user.pk}: {title}")
    return notification
