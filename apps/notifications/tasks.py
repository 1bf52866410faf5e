"""Celery tasks for notification delivery."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from shared.domain.exceptions import TransientDependencyError

from .dispatcher import DeliveryStatus, NotificationDispatcher
from .payloads import expand_payload
from .policies import policy_for

logger = logging.getLogger(__name__)


@shared_task(bind=True, name="notifications.deliver_notification")
def deliver_notification(self, event_type: str, recipient_id: int, payload: dict) -> str:
    """
    Deliver one notification, retrying transient failures.

    The booking referenced by ``payload`` is loaded here; if it is gone
    the notification is discarded. Database and channel failures are
    retried following the event type's policy; once it is exhausted the
    failure is logged and the task gives up.

    Returns:
        str: the DeliveryStatus value
    """
    policy = policy_for(event_type)
    retries = self.request.retries or 0

    try:
        full_payload = expand_payload(payload)
        if full_payload is None:
            logger.info(
                f"Discarding {event_type} notification for user {recipient_id}: "
                f"booking {payload.get('booking_id')} not found"
            )
            return DeliveryStatus.DISCARDED.value
        status = NotificationDispatcher().dispatch(event_type, recipient_id, full_payload)
    except TransientDependencyError as exc:
        if policy.exhausted(retries):
            logger.error(
                f"Giving up on {event_type} notification for user {recipient_id} "
                f"after {retries + 1} attempts: {exc}"
            )
            return DeliveryStatus.FAILED.value

        countdown = policy.countdown(retries)
        logger.warning(
            f"Retrying {event_type} notification for user {recipient_id} in {countdown}s "
            f"(attempt {retries + 1} of {policy.max_attempts}): {exc}"
        )
        raise self.retry(exc=exc, countdown=countdown, max_retries=policy.max_attempts - 1)

    return status.value
