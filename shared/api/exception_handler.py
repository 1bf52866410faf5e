"""DRF exception handler that renders domain errors."""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StateError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (StateError, status.HTTP_409_CONFLICT),
)


def status_for(exc: DomainError) -> int:
    for error_class, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def domain_exception_handler(exc, context):  # type: ignore
    """Map DomainError subclasses to HTTP responses, defer the rest to DRF."""

    if isinstance(exc, DomainError):
        view = context.get("view")
        logger.info(
            "Domain error in %s: %s (%s)",
            view.__class__.__name__ if view else "unknown view",
            exc,
            exc.code,
        )
        return Response(exc.as_dict(), status=status_for(exc))
    return drf_exception_handler(exc, context)
