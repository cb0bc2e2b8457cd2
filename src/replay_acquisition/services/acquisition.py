"""Fetches a booking's recording into delivery storage."""

import logging
from dataclasses import dataclass

from replay_acquisition.domain.bookings import at_clock
from replay_acquisition.domain.recordings import AcquisitionRequest, AcquisitionResult
from replay_acquisition.services.recordings import RecordingLocator
from replay_acquisition.services.transfers import TransferOrchestrator

_logger = logging.getLogger(__name__)


@dataclass
class RecordingAcquisitionService:
    """Locates the recording of a booking window and copies it."""

    locator: RecordingLocator
    orchestrator: TransferOrchestrator
    destination_folder: str

    async def acquire(self, request: AcquisitionRequest) -> AcquisitionResult:
        """Locate and copy the recording for a booking."""
        start = at_clock(request.booking_date, request.start_time)
        end = at_clock(request.booking_date, request.end_time)
        _logger.info(
            "Acquiring recording: booking=%s court=%s camera=%s window=%s-%s",
            request.booking_id,
            request.court_name,
            request.camera_id,
            start.isoformat(),
            end.isoformat(),
        )
        match = await self.locator.locate(request.camera_id, start, end)
        await self.orchestrator.copy(match.source_path, self.destination_folder)
        destination = f"{self.destination_folder.rstrip('/')}/{match.file_name}"
        return AcquisitionResult(
            filename=match.file_name,
            source_path=match.source_path,
            destination_path=destination,
            recording=match,
        )
