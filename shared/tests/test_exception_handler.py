"""Tests for rendering domain errors as HTTP responses."""

from __future__ import annotations

import pytest
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated

from shared.api.exception_handler import domain_exception_handler, status_for
from shared.domain.exceptions import (
    AuthorizationError,
    CancellationWindowClosed,
    ConflictError,
    NotFoundError,
    StateError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ValidationError("bad"), status.HTTP_400_BAD_REQUEST),
        (AuthorizationError("no"), status.HTTP_403_FORBIDDEN),
        (NotFoundError("gone"), status.HTTP_404_NOT_FOUND),
        (ConflictError("taken"), status.HTTP_409_CONFLICT),
        (StateError("late"), status.HTTP_409_CONFLICT),
        (CancellationWindowClosed("too late"), status.HTTP_409_CONFLICT),
    ],
)
def test_status_for_domain_errors(error, expected) -> None:
    assert status_for(error) == expected


def test_conflict_body_lists_offending_ids() -> None:
    error = ConflictError(
        "Vendor is busy.",
        field_errors={"event_start": ["Overlaps booking 4."]},
        booking_ids=[4],
        slot_ids=[9],
    )

    response = domain_exception_handler(error, {})

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.data == {
        "detail": "Vendor is busy.",
        "code": "conflict",
        "errors": {"event_start": ["Overlaps booking 4."]},
        "conflicting_booking_ids": [4],
        "conflicting_slot_ids": [9],
    }


def test_validation_error_from_errors_keeps_fields() -> None:
    error = ValidationError.from_errors({"amount": ["Amount must be greater than zero."]})
    body = domain_exception_handler(error, {}).data
    assert body["code"] == "validation_error"
    assert body["errors"] == {"amount": ["Amount must be greater than zero."]}


def test_non_domain_errors_fall_back_to_drf() -> None:
    response = domain_exception_handler(NotAuthenticated(), {})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
