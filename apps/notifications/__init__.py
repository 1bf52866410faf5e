"""Notifications app package.

Turns booking and message events into notifications for the other
party. Events are mapped to ``(event_type, recipient_id, payload)``
triples and handed to a Celery task, which delivers them through the
in-app inbox and e-mail with a bounded retry policy per event type.
"""
