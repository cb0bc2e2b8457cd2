"""Scheduled acquisition run over a day's bookings."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from replay_acquisition.adapters.booking_api_client import BookingSource
from replay_acquisition.domain.bookings import Booking
from replay_acquisition.domain.errors import FatalSourceError
from replay_acquisition.domain.runs import (
    BookingOutcome,
    BookingStatus,
    RunStatus,
    RunSummary,
)
from replay_acquisition.services.eligibility import classify, select_eligible

_logger = logging.getLogger(__name__)


class Pacer(Protocol):
    """Pacing policy between two dispatches."""

    async def pause(self) -> None:
        """Wait before the next dispatch."""


@dataclass
class FixedDelayPacer(Pacer):
    """Waits a fixed delay between dispatches."""

    delay_seconds: float = 2.0
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    async def pause(self) -> None:
        if self.delay_seconds > 0:
            await self.sleep(self.delay_seconds)


def local_clock(timezone: str) -> Callable[[], datetime]:
    """Return a clock reading the current time in `timezone`."""
    tz = ZoneInfo(timezone)

    def _now() -> datetime:
        return datetime.now(tz=tz)

    return _now


@dataclass
class AcquisitionDriver:
    """Runs one pass: fetch, filter, dispatch, summarize.

    Bookings are dispatched one at a time in source order. A failing booking
    is recorded and the queue continues; only an unreachable booking source
    ends the run early.
    """

    booking_source: BookingSource
    clock: Callable[[], datetime]
    pacer: Pacer = field(default_factory=FixedDelayPacer)

    async def run(self, target_date: date | None = None) -> RunSummary:
        """Execute a run and return its summary; never raises."""
        now = self.clock()
        run_date = target_date or now.date()
        summary = RunSummary(run_date=run_date)
        _logger.info(
            "Acquisition run started: date=%s now=%s", run_date, now.strftime("%H:%M")
        )

        try:
            bookings = await self.booking_source.list_bookings_for_date(run_date)
        except FatalSourceError as exc:
            _logger.error("Acquisition run aborted: %s", exc)
            summary.status = RunStatus.FAILED_FATAL
            summary.error = str(exc)
            return summary

        eligible = self._filter(bookings, now, summary)
        if not eligible:
            _logger.info("No ended bookings without a recording")
            self._log_summary(summary)
            return summary

        _logger.info("Bookings to process: %s", len(eligible))
        for index, booking in enumerate(eligible):
            if index > 0:
                await self.pacer.pause()
            summary.record(await self._dispatch(booking))

        summary.status = RunStatus.COMPLETED_WITH_RESULTS
        self._log_summary(summary)
        return summary

    def _filter(
        self, bookings: list[Booking], now: datetime, summary: RunSummary
    ) -> list[Booking]:
        summary.seen = len(bookings)
        _logger.info("Bookings for the day: %s", len(bookings))
        for booking in bookings:
            status = classify(booking, now)
            _logger.info("  %s: %s", booking.describe(), status.value)
            if status is BookingStatus.HAS_RECORDING:
                summary.skipped_has_recording += 1
            elif status is BookingStatus.NOT_ENDED:
                summary.skipped_not_ended += 1
        return select_eligible(bookings, now)

    async def _dispatch(self, booking: Booking) -> BookingOutcome:
        _logger.info("Processing booking %s: %s", booking.booking_id, booking.describe())
        try:
            result = await self.booking_source.auto_download(booking.booking_id)
        except Exception as exc:  # noqa: BLE001
            _logger.error(
                "Auto-download failed: booking=%s court=%s customer=%s error=%s",
                booking.booking_id,
                booking.court_name,
                booking.customer_name,
                exc,
            )
            return _failure(booking, str(exc) or type(exc).__name__)

        if not result.success:
            _logger.error(
                "Auto-download failed: booking=%s court=%s customer=%s error=%s",
                booking.booking_id,
                booking.court_name,
                booking.customer_name,
                result.error,
            )
            return _failure(booking, result.error or "unknown error")

        _logger.info(
            "Recording stored: booking=%s file=%s (%s MB)",
            booking.booking_id,
            result.filename,
            result.file_size_mb,
        )
        return BookingOutcome(
            booking_id=booking.booking_id,
            court_name=booking.court_name,
            customer_name=booking.customer_name,
            success=True,
            filename=result.filename,
            file_size=result.file_size,
        )

    def _log_summary(self, summary: RunSummary) -> None:
        _logger.info(
            "Acquisition run finished: date=%s status=%s seen=%s "
            "skipped_not_ended=%s skipped_has_recording=%s attempted=%s "
            "succeeded=%s failed=%s",
            summary.run_date,
            summary.status.value,
            summary.seen,
            summary.skipped_not_ended,
            summary.skipped_has_recording,
            summary.attempted,
            summary.succeeded,
            summary.failed,
        )


def _failure(booking: Booking, error: str) -> BookingOutcome:
    return BookingOutcome(
        booking_id=booking.booking_id,
        court_name=booking.court_name,
        customer_name=booking.customer_name,
        success=False,
        error=error,
    )
