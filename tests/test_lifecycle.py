from unittest.mock import MagicMock

import pytest

from sangraha import lifecycle, models
from sangraha.errors import InsufficientCapacity, InvalidTransition
from sangraha.ledger import CapacityLedger
from sangraha.lifecycle import CapacityEffect
from sangraha.models import BookingStatus

PENDING, ACTIVE, COMPLETED, CANCELLED = (
    BookingStatus.PENDING, BookingStatus.ACTIVE, BookingStatus.COMPLETED, BookingStatus.CANCELLED
)


def make_booking(status=PENDING, quantity=100):
    """An unsaved booking; the ledger is mocked so no database is needed."""
    return models.Booking(id="b-1", facility_id="f-1", user_id="farmer-1", quantity=quantity, status=status)


@pytest.mark.parametrize("current, target, effect", [
    (PENDING, ACTIVE, CapacityEffect.RESERVE),
    (PENDING, CANCELLED, CapacityEffect.NONE),
    (ACTIVE, CANCELLED, CapacityEffect.RELEASE),
    (ACTIVE, COMPLETED, CapacityEffect.NONE),
])
def test_allowed_transitions(current, target, effect):
    assert lifecycle.plan_transition(current, target) == effect


@pytest.mark.parametrize("current", [COMPLETED, CANCELLED])
@pytest.mark.parametrize("target", list(BookingStatus))
def test_terminal_statuses_cannot_change(current, target):
    with pytest.raises(InvalidTransition):
        lifecycle.plan_transition(current, target)


@pytest.mark.parametrize("current, target", [
    (PENDING, PENDING),
    (PENDING, COMPLETED),
    (ACTIVE, ACTIVE),
    (ACTIVE, PENDING),
])
def test_transitions_outside_the_table_are_rejected(current, target):
    with pytest.raises(InvalidTransition):
        lifecycle.plan_transition(current, target)


def test_allowed_targets():
    assert set(lifecycle.allowed_targets(PENDING)) == {ACTIVE, CANCELLED}
    assert set(lifecycle.allowed_targets(ACTIVE)) == {COMPLETED, CANCELLED}
    assert lifecycle.allowed_targets(COMPLETED) == []


def test_approving_reserves_the_booked_quantity():
    ledger = MagicMock(spec=CapacityLedger)
    booking = make_booking(PENDING, quantity=120)

    lifecycle.apply_transition(booking, ACTIVE, ledger)

    ledger.reserve.assert_called_once_with("f-1", 120)
    ledger.release.assert_not_called()
    assert booking.status == ACTIVE


def test_cancelling_an_active_booking_releases_capacity():
    ledger = MagicMock(spec=CapacityLedger)
    booking = make_booking(ACTIVE, quantity=120)

    lifecycle.apply_transition(booking, CANCELLED, ledger)

    ledger.release.assert_called_once_with("f-1", 120)
    ledger.reserve.assert_not_called()
    assert booking.status == CANCELLED


@pytest.mark.parametrize("current, target", [(PENDING, CANCELLED), (ACTIVE, COMPLETED)])
def test_transitions_without_capacity_effect_leave_ledger_alone(current, target):
    ledger = MagicMock(spec=CapacityLedger)
    booking = make_booking(current)

    lifecycle.apply_transition(booking, target, ledger)

    ledger.reserve.assert_not_called()
    ledger.release.assert_not_called()
    assert booking.status == target


def test_failed_reservation_keeps_booking_pending():
    ledger = MagicMock(spec=CapacityLedger)
    ledger.reserve.side_effect = InsufficientCapacity()
    booking = make_booking(PENDING)

    with pytest.raises(InsufficientCapacity):
        lifecycle.apply_transition(booking, ACTIVE, ledger)

    assert booking.status == PENDING


def test_invalid_transition_touches_nothing():
    ledger = MagicMock(spec=CapacityLedger)
    booking = make_booking(COMPLETED)

    with pytest.raises(InvalidTransition):
        lifecycle.apply_transition(booking, CANCELLED, ledger)

    ledger.reserve.assert_not_called()
    ledger.release.assert_not_called()
    assert booking.status == COMPLETED
