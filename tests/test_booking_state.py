import pytest

from labhub.core.exceptions import InvalidTransition
from labhub.domain.booking_state import (
    BOOKING_TRANSITIONS,
    TERMINAL_STATUSES,
    BookingStatus,
    assert_booking_transition,
    can_transition,
)

ALLOWED = {
    ("pending", "approved"),
    ("pending", "rejected"),
    ("pending", "cancelled"),
    ("approved", "completed"),
    ("approved", "cancelled"),
}

STATUSES = [s.value for s in BookingStatus]


@pytest.mark.parametrize("current", STATUSES)
@pytest.mark.parametrize("target", STATUSES)
def test_transition_table(current, target):
    expected = (current, target) in ALLOWED
    assert can_transition(current, target) is expected
    if expected:
        assert_booking_transition(current, target)
    else:
        with pytest.raises(InvalidTransition) as exc:
            assert_booking_transition(current, target)
        assert exc.value.current == current
        assert exc.value.target == target


def test_terminal_statuses():
    assert TERMINAL_STATUSES == {"rejected", "completed", "cancelled"}


def test_every_status_has_an_entry():
    assert set(BOOKING_TRANSITIONS) == set(STATUSES)


def test_pending_is_only_reachable_by_creation():
    assert not any("pending" in targets for targets in BOOKING_TRANSITIONS.values())


def test_enum_members_work_as_status_strings():
    assert can_transition(BookingStatus.PENDING, BookingStatus.APPROVED)


def test_unknown_status_has_no_transitions():
    with pytest.raises(InvalidTransition):
        assert_booking_transition("archived", "pending")
