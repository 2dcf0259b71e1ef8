import pytest

from roombooking.errors import ConflictError, InvalidTransitionError
from roombooking.models import ReservationStatus
from roombooking.transitions import apply_status, can_transition

from helpers import make_reservation

PENDING = ReservationStatus.PENDING
CONFIRMED = ReservationStatus.CONFIRMED
CANCELLED = ReservationStatus.CANCELLED
REJECTED = ReservationStatus.REJECTED


@pytest.mark.parametrize("current,target", [
    (PENDING, CONFIRMED),
    (PENDING, REJECTED),
    (CONFIRMED, CANCELLED),
])
def test_allowed_transitions(current, target):
    reservation = make_reservation(status=current)

    assert apply_status(reservation, target) is True
    assert reservation.status == target


@pytest.mark.parametrize("current,target", [
    (PENDING, CANCELLED),
    (CONFIRMED, PENDING),
    (CONFIRMED, REJECTED),
    (CANCELLED, CONFIRMED),
    (REJECTED, CONFIRMED),
    (REJECTED, PENDING),
])
def test_forbidden_transitions_raise(current, target):
    reservation = make_reservation(status=current)

    with pytest.raises(InvalidTransitionError):
        apply_status(reservation, target)
    assert reservation.status == current


def test_invalid_transition_is_a_conflict():
    assert issubclass(InvalidTransitionError, ConflictError)


def test_reapplying_current_status_is_a_no_op():
    reservation = make_reservation(status=CANCELLED)

    assert apply_status(reservation, CANCELLED) is False
    assert reservation.status == CANCELLED


def test_can_transition_accepts_plain_strings():
    assert can_transition("pending", "confirmed")
    assert not can_transition("rejected", "confirmed")
