"""Copy task states for file transfers on the surveillance NAS."""

from dataclasses import dataclass
from enum import Enum


class CopyPhase(str, Enum):
    STARTED = "STARTED"
    POLLING = "POLLING"
    FINISHED = "FINISHED"
    TIMED_OUT = "TIMED_OUT"
    FAILED = "FAILED"


TERMINAL_PHASES = frozenset({CopyPhase.FINISHED, CopyPhase.TIMED_OUT, CopyPhase.FAILED})


@dataclass(frozen=True)
class CopyState:
    """Where a copy task stands after `attempt` status polls."""

    phase: CopyPhase
    task_id: str
    attempt: int = 0
    error_code: int | None = None

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES


@dataclass(frozen=True)
class PollResult:
    """Decoded answer of a single status query."""

    finished: bool
    error_code: int | None = None


@dataclass(frozen=True)
class CopyTask:
    """A completed copy task."""

    task_id: str
    source_path: str
    dest_folder: str
    attempts: int
