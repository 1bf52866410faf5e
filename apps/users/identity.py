"""Actor resolution for the booking engine.

Application services receive opaque actor ids and resolve them here, so
"who is acting" is always an explicit parameter rather than request state.
"""

from __future__ import annotations

from shared.domain.exceptions import AuthorizationError, NotFoundError

from .models import CustomUser


def resolve_actor(actor_id: int) -> CustomUser:
    """Return the active user for ``actor_id`` or raise NotFoundError."""

    try:
        return CustomUser.objects.get(pk=actor_id, is_active=True)
    except CustomUser.DoesNotExist:
        raise NotFoundError.for_field("actor", f"User {actor_id} not found.") from None


def require_role(user: CustomUser, role: str) -> CustomUser:
    if user.role != role:
        raise AuthorizationError(
            f"This operation requires a {role} account.",
            field_errors={"actor": [f"User {user.pk} is not a {role}."]},
        )
    return user


def require_vendor(user: CustomUser) -> CustomUser:
    return require_role(user, CustomUser.RoleChoices.VENDOR)


def require_customer(user: CustomUser) -> CustomUser:
    return require_role(user, CustomUser.RoleChoices.CUSTOMER)
