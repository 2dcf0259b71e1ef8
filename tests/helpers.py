"""Shared dates and builders for the test suite."""

from datetime import date, datetime, time

from roombooking.models import Reservation, ReservationStatus

# A Monday far in the future so "upcoming" and "past" stay stable.
DAY = date(2030, 1, 7)


def at(hour, minute=0, day=DAY):
    return datetime.combine(day, time(hour, minute))


def make_reservation(room_id=1, start=None, end=None, status=ReservationStatus.CONFIRMED, **extra):
    return Reservation(
        room_id=room_id,
        user_id=extra.pop("user_id", "user1"),
        title=extra.pop("title", "Team sync"),
        start_time=start or at(10),
        end_time=end or at(12),
        status=status,
        **extra,
    )
