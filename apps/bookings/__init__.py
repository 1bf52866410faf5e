"""Bookings app package.

This app encapsulates the booking lifecycle: the status state machine,
the command handlers that create, answer, modify, cancel and complete
bookings, and the scheduled jobs that send reminders and close finished
engagements. Conflict-checked writes are serialized per vendor with a
row lock inside a database transaction.
"""
