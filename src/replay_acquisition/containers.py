"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from replay_acquisition.adapters.booking_api_client import (
    BookingSource,
    HttpxBookingApiClient,
)
from replay_acquisition.adapters.surveillance_client import HttpxSurveillanceClient
from replay_acquisition.config import Settings
from replay_acquisition.services.acquisition import RecordingAcquisitionService
from replay_acquisition.services.driver import (
    AcquisitionDriver,
    FixedDelayPacer,
    local_clock,
)
from replay_acquisition.services.recordings import RecordingLocator
from replay_acquisition.services.sessions import SessionManager
from replay_acquisition.services.transfers import TransferOrchestrator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    booking_source: BookingSource
    session_manager: SessionManager
    recording_locator: RecordingLocator
    transfer_orchestrator: TransferOrchestrator
    acquisition_service: RecordingAcquisitionService
    driver: AcquisitionDriver
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    surveillance_client = HttpxSurveillanceClient.create(
        base_url=resolved_settings.nas_base_url,
        verify_ssl=resolved_settings.nas_verify_ssl,
        copy_start_timeout=resolved_settings.copy_start_timeout_seconds,
    )
    booking_client = HttpxBookingApiClient.create(
        base_url=resolved_settings.booking_api_base_url,
        user=resolved_settings.booking_api_user,
        password=resolved_settings.booking_api_password,
        auto_download_timeout=resolved_settings.auto_download_timeout_seconds,
        timezone=resolved_settings.timezone,
    )
    session_manager = SessionManager(
        client=surveillance_client,
        account=resolved_settings.nas_account,
        password=resolved_settings.nas_password,
    )
    recording_locator = RecordingLocator(
        sessions=session_manager,
        timezone=resolved_settings.timezone,
    )
    transfer_orchestrator = TransferOrchestrator(
        sessions=session_manager,
        poll_interval_seconds=resolved_settings.copy_poll_interval_seconds,
        max_attempts=resolved_settings.copy_max_attempts,
    )
    acquisition_service = RecordingAcquisitionService(
        locator=recording_locator,
        orchestrator=transfer_orchestrator,
        destination_folder=resolved_settings.destination_folder,
    )
    driver = AcquisitionDriver(
        booking_source=booking_client,
        clock=local_clock(resolved_settings.timezone),
        pacer=FixedDelayPacer(resolved_settings.dispatch_delay_seconds),
    )

    async def close_resources() -> None:
        await session_manager.logout_all()
        await surveillance_client.close()
        await booking_client.close()

    return AppContainer(
        settings=resolved_settings,
        booking_source=booking_client,
        session_manager=session_manager,
        recording_locator=recording_locator,
        transfer_orchestrator=transfer_orchestrator,
        acquisition_service=acquisition_service,
        driver=driver,
        close_resources=close_resources,
    )
