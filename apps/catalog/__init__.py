"""Catalog app package.

Holds the vendor services customers book against. The booking engine
only reads from it through ``lookup_service``.
"""
