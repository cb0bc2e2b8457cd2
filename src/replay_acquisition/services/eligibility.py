"""Selection of bookings whose recording should be fetched."""

from collections.abc import Iterable
from datetime import datetime

from replay_acquisition.domain.bookings import Booking
from replay_acquisition.domain.runs import BookingStatus


def classify(booking: Booking, now: datetime) -> BookingStatus:
    """Classify a booking relative to the local wall-clock time `now`."""
    if booking.has_recording:
        return BookingStatus.HAS_RECORDING
    if not is_ended(booking, now):
        return BookingStatus.NOT_ENDED
    return BookingStatus.PENDING


def is_ended(booking: Booking, now: datetime) -> bool:
    """Return whether the booking's end minute is at or before `now`'s minute."""
    current = now.replace(second=0, microsecond=0, tzinfo=None)
    return booking.ends_at <= current


def select_eligible(bookings: Iterable[Booking], now: datetime) -> list[Booking]:
    """Return ended bookings without a recording, in input order."""
    return [
        booking
        for booking in bookings
        if classify(booking, now) is BookingStatus.PENDING
    ]
