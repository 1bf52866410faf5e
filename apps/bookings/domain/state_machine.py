"""
Booking Status Finite State Machine

State transitions (action: from -> to, actor):
- accept: PENDING -> ACCEPTED (vendor)
- decline: PENDING -> DECLINED (vendor)
- counter_offer: PENDING -> COUNTER_OFFERED (vendor)
- accept_counter_offer: COUNTER_OFFERED -> ACCEPTED (customer)
- decline_counter_offer: COUNTER_OFFERED -> DECLINED (customer)
- cancel: PENDING -> CANCELLED, ACCEPTED -> CANCELLED (customer or vendor)
- complete: ACCEPTED -> COMPLETED (system)

COMPLETED, DECLINED and CANCELLED are terminal. The 24-hour cancellation
cutoff depends on the clock and is enforced by the command handlers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Tuple

from shared.domain.exceptions import AuthorizationError, StateError


class BookingStatus(str, Enum):
    PENDING = 'pending'
    ACCEPTED = 'accepted'
    DECLINED = 'declined'
    COUNTER_OFFERED = 'counter_offered'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class BookingAction(str, Enum):
    ACCEPT = 'accept'
    DECLINE = 'decline'
    COUNTER_OFFER = 'counter_offer'
    ACCEPT_COUNTER_OFFER = 'accept_counter_offer'
    DECLINE_COUNTER_OFFER = 'decline_counter_offer'
    CANCEL = 'cancel'
    COMPLETE = 'complete'


class ActorRole(str, Enum):
    CUSTOMER = 'customer'
    VENDOR = 'vendor'
    SYSTEM = 'system'


@dataclass(frozen=True)
class Transition:
    action: BookingAction
    source: BookingStatus
    target: BookingStatus
    actors: FrozenSet[ActorRole]


_PARTIES = frozenset({ActorRole.CUSTOMER, ActorRole.VENDOR})

TRANSITIONS: Tuple[Transition, ...] = (
    Transition(BookingAction.ACCEPT, BookingStatus.PENDING, BookingStatus.ACCEPTED,
               frozenset({ActorRole.VENDOR})),
    Transition(BookingAction.DECLINE, BookingStatus.PENDING, BookingStatus.DECLINED,
               frozenset({ActorRole.VENDOR})),
    Transition(BookingAction.COUNTER_OFFER, BookingStatus.PENDING, BookingStatus.COUNTER_OFFERED,
               frozenset({ActorRole.VENDOR})),
    Transition(BookingAction.ACCEPT_COUNTER_OFFER, BookingStatus.COUNTER_OFFERED, BookingStatus.ACCEPTED,
               frozenset({ActorRole.CUSTOMER})),
    Transition(BookingAction.DECLINE_COUNTER_OFFER, BookingStatus.COUNTER_OFFERED, BookingStatus.DECLINED,
               frozenset({ActorRole.CUSTOMER})),
    Transition(BookingAction.CANCEL, BookingStatus.PENDING, BookingStatus.CANCELLED, _PARTIES),
    Transition(BookingAction.CANCEL, BookingStatus.ACCEPTED, BookingStatus.CANCELLED, _PARTIES),
    Transition(BookingAction.COMPLETE, BookingStatus.ACCEPTED, BookingStatus.COMPLETED,
               frozenset({ActorRole.SYSTEM})),
)

_TABLE: Dict[Tuple[BookingStatus, BookingAction], Transition] = {
    (item.source, item.action): item for item in TRANSITIONS
}

INITIAL_STATUS = BookingStatus.PENDING

# Bookings in these states hold the vendor's calendar.
ACTIVE_STATUSES: FrozenSet[BookingStatus] = frozenset({BookingStatus.PENDING, BookingStatus.ACCEPTED})

TERMINAL_STATUSES: FrozenSet[BookingStatus] = frozenset(
    status for status in BookingStatus
    if not any(item.source == status for item in TRANSITIONS)
)


def is_terminal(status) -> bool:
    return BookingStatus(status) in TERMINAL_STATUSES


def is_active(status) -> bool:
    return BookingStatus(status) in ACTIVE_STATUSES


def allowed_actions(status) -> FrozenSet[BookingAction]:
    status = BookingStatus(status)
    return frozenset(item.action for item in TRANSITIONS if item.source == status)


def reachable_statuses(status) -> FrozenSet[BookingStatus]:
    """Statuses reachable from ``status`` in exactly one transition"""
    status = BookingStatus(status)
    return frozenset(item.target for item in TRANSITIONS if item.source == status)


def can_transition(status, action, role) -> bool:
    item = _TABLE.get((BookingStatus(status), BookingAction(action)))
    return item is not None and ActorRole(role) in item.actors


def transition(status, action, role) -> BookingStatus:
    """
    Apply ``action`` by an actor with ``role`` to ``status``

    Raises:
        StateError: action not legal from the current status
        AuthorizationError: role may not perform the action
    """
    status = BookingStatus(status)
    action = BookingAction(action)
    role = ActorRole(role)

    item = _TABLE.get((status, action))
    if item is None:
        raise StateError(
            f"Cannot {action.value.replace('_', ' ')} a booking that is {status.value}.",
            field_errors={'status': [f"'{action.value}' is not allowed from '{status.value}'."]},
        )
    if role not in item.actors:
        allowed = ', '.join(sorted(actor.value for actor in item.actors))
        raise AuthorizationError(
            f"Only {allowed} may {action.value.replace('_', ' ')} this booking.",
            field_errors={'actor': [f"Role '{role.value}' may not perform '{action.value}'."]},
        )
    return item.target
