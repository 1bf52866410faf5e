"""Availability app package.

Owns the vendor calendar (declared availability slots) and the conflict
detector that decides whether a booking window can be granted. The pure
rules live in ``domain/``; ``services`` loads calendar data and takes the
per-vendor lock.
"""
