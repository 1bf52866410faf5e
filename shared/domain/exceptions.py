"""
Domain Error Taxonomy

Every error the booking engine surfaces to its callers derives from
DomainError. Errors carry a stable ``code`` and optional field-level
messages so the API layer can render them without string parsing.

- ValidationError: malformed or out-of-range input
- ConflictError: overlapping slot or booking
- AuthorizationError: actor is not a party or lacks the required role
- StateError: transition not legal from the current state
- NotFoundError: referenced vendor/slot/booking/service is absent
- TransientDependencyError: notification channel hiccup (retried, never surfaced)
"""

from typing import Dict, Iterable, List


class DomainError(Exception):
    """Base class for errors raised by domain and application services."""

    code = 'domain_error'

    def __init__(self, message: str, *, field_errors: Dict[str, List[str]] | None = None):
        super().__init__(message)
        self.message = message
        self.field_errors: Dict[str, List[str]] = dict(field_errors or {})

    @classmethod
    def for_field(cls, field_name: str, message: str) -> 'DomainError':
        return cls(message, field_errors={field_name: [message]})

    def as_dict(self) -> dict:
        return {
            'detail': self.message,
            'code': self.code,
            'errors': self.field_errors,
        }

    def __str__(self):
        return self.message


class ValidationError(DomainError, ValueError):
    """Input is malformed or violates a domain invariant."""

    code = 'validation_error'

    @classmethod
    def from_errors(cls, errors: Dict[str, List[str]]) -> 'ValidationError':
        messages = [f"{name}: {msg}" for name, msgs in errors.items() for msg in msgs]
        return cls('; '.join(messages) or 'Invalid input', field_errors=errors)


class ConflictError(DomainError):
    """The requested window collides with the vendor's calendar."""

    code = 'conflict'

    def __init__(
        self,
        message: str,
        *,
        field_errors: Dict[str, List[str]] | None = None,
        booking_ids: Iterable[int] = (),
        slot_ids: Iterable[int] = (),
    ):
        super().__init__(message, field_errors=field_errors)
        self.booking_ids = list(booking_ids)
        self.slot_ids = list(slot_ids)

    def as_dict(self) -> dict:
        data = super().as_dict()
        data['conflicting_booking_ids'] = self.booking_ids
        data['conflicting_slot_ids'] = self.slot_ids
        return data


class AuthorizationError(DomainError):
    """The actor may not perform this operation."""

    code = 'not_authorized'


class StateError(DomainError):
    """The booking is not in a state that allows this operation."""

    code = 'invalid_state'


class CancellationWindowClosed(StateError):
    """Cancellation requested too close to the event start."""

    code = 'cancellation_window_closed'


class NotFoundError(DomainError):
    """A referenced entity does not exist."""

    code = 'not_found'


class TransientDependencyError(DomainError):
    """A downstream dependency failed in a way that is worth retrying."""

    code = 'transient_dependency'
