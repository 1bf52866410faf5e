"""
Unit of Work Pattern

Wraps a database transaction, provides row locking for the per-vendor
calendar, and publishes collected domain events only after the
transaction commits.
"""

from typing import List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            vendor = uow.lock(User.objects.filter(pk=vendor_id)).get()
            ...
            uow.add_event(BookingCreated(...))
        # Events are published after commit

    If the block raises, the transaction rolls back and the collected
    events are discarded.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._transaction = None

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic()
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._transaction:
                self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def lock(self, queryset):
        """
        Apply SELECT ... FOR UPDATE to a queryset

        Writers holding the same row lock are serialized. Backends without
        row locks (SQLite) ignore the clause.
        """
        return queryset.select_for_update()

    def add_event(self, event: DomainEvent):
        """Queue an event for publication after commit"""
        self._events.append(event)

    def commit(self):
        """
        Schedule event publication

        transaction.on_commit() defers the callback until the outermost
        atomic block commits.
        """
        logger.debug("Committing transaction with %d events", len(self._events))

        events = self._events.copy()
        self._events.clear()

        if events:
            transaction.on_commit(lambda: self._publish_events(events))

    def rollback(self):
        """Discard events; the atomic block rolls back on exit"""
        if self._events:
            logger.warning("Rolling back transaction, discarding %d events", len(self._events))
        self._events.clear()

    def _publish_events(self, events: List[DomainEvent]):
        """Publish collected events to the message bus"""
        from shared.application.message_bus import message_bus

        logger.info("Publishing %d domain events after commit", len(events))

        try:
            message_bus.publish_events(events)
        except Exception as e:
            # The transaction is already committed; delivery problems are
            # reported through logs only.
            logger.error("Error publishing events: %s", e, exc_info=True)
