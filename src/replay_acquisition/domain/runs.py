"""Run summary models for the acquisition driver."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class RunStatus(str, Enum):
    COMPLETED_NO_WORK = "COMPLETED_NO_WORK"
    COMPLETED_WITH_RESULTS = "COMPLETED_WITH_RESULTS"
    FAILED_FATAL = "FAILED_FATAL"


class BookingStatus(str, Enum):
    HAS_RECORDING = "HAS_RECORDING"
    NOT_ENDED = "NOT_ENDED"
    PENDING = "PENDING"


@dataclass(frozen=True)
class BookingOutcome:
    """Result of dispatching a single booking."""

    booking_id: int | str
    court_name: str
    customer_name: str | None
    success: bool
    filename: str | None = None
    file_size: int | None = None
    error: str | None = None


@dataclass
class RunSummary:
    """Aggregate of one acquisition run."""

    run_date: date
    status: RunStatus = RunStatus.COMPLETED_NO_WORK
    seen: int = 0
    skipped_not_ended: int = 0
    skipped_has_recording: int = 0
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    outcomes: list[BookingOutcome] = field(default_factory=list)
    error: str | None = None

    def record(self, outcome: BookingOutcome) -> None:
        """Add a dispatch outcome and update the counters."""
        self.outcomes.append(outcome)
        self.attempted += 1
        if outcome.success:
            self.succeeded += 1
        else:
            self.failed += 1
