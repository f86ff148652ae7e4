"""
Booking status lifecycle.

    pending -> active      reserves the booking's quantity
    pending -> cancelled   nothing was reserved, nothing to release
    active  -> completed   capacity stays consumed
    active  -> cancelled   releases the booking's quantity

completed and cancelled are terminal. A pending booking holds no capacity;
it is only checked against availability when requested and committed when
the provider approves it.
"""
import logging
from enum import Enum

from .errors import InvalidTransition
from .ledger import CapacityLedger
from .models import Booking, BookingStatus

logger = logging.getLogger("sangraha")


class CapacityEffect(str, Enum):
    NONE = "none"
    RESERVE = "reserve"
    RELEASE = "release"


TRANSITIONS: dict[tuple[BookingStatus, BookingStatus], CapacityEffect] = {
    (BookingStatus.PENDING, BookingStatus.ACTIVE): CapacityEffect.RESERVE,
    (BookingStatus.PENDING, BookingStatus.CANCELLED): CapacityEffect.NONE,
    (BookingStatus.ACTIVE, BookingStatus.CANCELLED): CapacityEffect.RELEASE,
    (BookingStatus.ACTIVE, BookingStatus.COMPLETED): CapacityEffect.NONE,
}

TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})


def allowed_targets(current: BookingStatus) -> list[BookingStatus]:
    return [to for (frm, to) in TRANSITIONS if frm == current]


def plan_transition(current: BookingStatus, target: BookingStatus) -> CapacityEffect:
    """
    Returns the capacity effect paired with current -> target, or raises
    InvalidTransition when the move is not in the table.
    """
    effect = TRANSITIONS.get((current, target))
    if effect is None:
        if current in TERMINAL_STATUSES:
            raise InvalidTransition(f"Booking is already {current.value}; its status can no longer change.")
        allowed = ", ".join(s.value for s in allowed_targets(current))
        raise InvalidTransition(
            f"Cannot change booking status from {current.value} to {target.value} (allowed: {allowed})."
        )
    return effect


def apply_transition(booking: Booking, target: BookingStatus, ledger: CapacityLedger) -> Booking:
    """
    Moves the booking to `target` and applies the paired capacity effect.

    The ledger call happens before the status is written, so a rejected
    reservation leaves the booking untouched. Callers run this inside a unit
    of work so the two writes commit together.
    """
    current = BookingStatus(booking.status)
    effect = plan_transition(current, target)

    if effect == CapacityEffect.RESERVE:
        ledger.reserve(booking.facility_id, booking.quantity)
    elif effect == CapacityEffect.RELEASE:
        ledger.release(booking.facility_id, booking.quantity)

    booking.status = target
    logger.info(f"Booking {booking.id}: {current.value} -> {target.value} (capacity: {effect.value}).")
    return booking
