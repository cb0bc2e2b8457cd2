"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date, datetime

import pytest

from replay_acquisition.adapters.booking_api_client import BookingSource
from replay_acquisition.adapters.surveillance_client import SurveillanceClient
from replay_acquisition.config import Settings
from replay_acquisition.containers import AppContainer
from replay_acquisition.domain.bookings import AutoDownloadResult, Booking
from replay_acquisition.domain.errors import FatalSourceError
from replay_acquisition.services.acquisition import RecordingAcquisitionService
from replay_acquisition.services.driver import AcquisitionDriver, Pacer
from replay_acquisition.services.recordings import RecordingLocator
from replay_acquisition.services.sessions import SessionManager
from replay_acquisition.services.transfers import TransferOrchestrator

TODAY = date(2025, 11, 24)

SESSION_EXPIRED = {"success": False, "error": {"code": 119}}


@dataclass
class FakeSurveillanceClient(SurveillanceClient):
    """Scriptable surveillance client that records calls."""

    recordings: list[dict[str, object]] = field(
        default_factory=lambda: [
            {
                "id": 501,
                "folder": "/volume1/surveillance/Court 1",
                "path": "20251124PM/Court1-20251124-180000.mp4",
                "name": "Court1-20251124-180000",
                "startTime": 1764003600,
                "stopTime": 1764007200,
            }
        ]
    )
    cameras: list[dict[str, object]] = field(
        default_factory=lambda: [{"id": 7, "newName": "Court 1", "status": 1}]
    )
    rejected_logins: set[str] = field(default_factory=set)
    copy_start_response: dict[str, object] = field(
        default_factory=lambda: {"success": True, "data": {"taskid": "FileStation_1"}}
    )
    status_responses: list[dict[str, object]] = field(
        default_factory=lambda: [{"success": True, "data": {"finished": True}}]
    )
    expire_sessions: dict[str, int] = field(default_factory=dict)
    calls: list[tuple[str, dict[str, object]]] = field(default_factory=list)
    logins: dict[str, int] = field(default_factory=dict)

    async def login(self, account: str, password: str, session: str) -> dict[str, object]:
        self.calls.append(("login", {"account": account, "session": session}))
        if session in self.rejected_logins:
            return {"success": False, "error": {"code": 400}}
        self.logins[session] = self.logins.get(session, 0) + 1
        return {"success": True, "data": {"sid": f"{session}-{self.logins[session]}"}}

    async def logout(self, sid: str, session: str) -> dict[str, object]:
        self.calls.append(("logout", {"sid": sid, "session": session}))
        return {"success": True}

    async def api_info(self) -> dict[str, object]:
        self.calls.append(("api_info", {}))
        return {
            "success": True,
            "data": {"SYNO.SurveillanceStation.Recording": {"maxVersion": 6}},
        }

    async def list_cameras(self, sid: str) -> dict[str, object]:
        self.calls.append(("list_cameras", {"sid": sid}))
        if self._expired("list_cameras"):
            return SESSION_EXPIRED
        return {"success": True, "data": {"cameras": self.cameras}}

    async def list_recordings(
        self, sid: str, camera_id: int | str, from_time: int, to_time: int
    ) -> dict[str, object]:
        self.calls.append(
            (
                "list_recordings",
                {
                    "sid": sid,
                    "camera_id": camera_id,
                    "from_time": from_time,
                    "to_time": to_time,
                },
            )
        )
        if self._expired("list_recordings"):
            return SESSION_EXPIRED
        return {"success": True, "data": {"events": self.recordings}}

    async def start_copy(  # noqa: PLR0913
        self,
        sid: str,
        source_paths: list[str],
        dest_folder: str,
        *,
        overwrite: bool,
        remove_src: bool,
    ) -> dict[str, object]:
        self.calls.append(
            (
                "start_copy",
                {
                    "sid": sid,
                    "source_paths": source_paths,
                    "dest_folder": dest_folder,
                    "overwrite": overwrite,
                    "remove_src": remove_src,
                },
            )
        )
        if self._expired("start_copy"):
            return SESSION_EXPIRED
        return self.copy_start_response

    async def copy_status(self, sid: str, task_id: str) -> dict[str, object]:
        self.calls.append(("copy_status", {"sid": sid, "task_id": task_id}))
        if self._expired("copy_status"):
            return SESSION_EXPIRED
        if len(self.status_responses) > 1:
            return self.status_responses.pop(0)
        return self.status_responses[0]

    def calls_to(self, method: str) -> list[dict[str, object]]:
        return [params for name, params in self.calls if name == method]

    def _expired(self, method: str) -> bool:
        remaining = self.expire_sessions.get(method, 0)
        if remaining <= 0:
            return False
        self.expire_sessions[method] = remaining - 1
        return True


@dataclass
class FakeBookingSource(BookingSource):
    """In-memory booking collaborator."""

    bookings: list[Booking] = field(default_factory=list)
    results: dict[int | str, AutoDownloadResult | Exception] = field(
        default_factory=dict
    )
    unavailable: bool = False
    requested_dates: list[date] = field(default_factory=list)
    downloads: list[int | str] = field(default_factory=list)

    async def list_bookings_for_date(self, booking_date: date) -> list[Booking]:
        self.requested_dates.append(booking_date)
        if self.unavailable:
            raise FatalSourceError("Booking source unavailable: connection refused")
        return list(self.bookings)

    async def auto_download(self, booking_id: int | str) -> AutoDownloadResult:
        self.downloads.append(booking_id)
        result = self.results.get(
            booking_id,
            AutoDownloadResult(
                success=True, filename=f"booking_{booking_id}.mp4", file_size=1048576
            ),
        )
        if isinstance(result, Exception):
            raise result
        return result


@dataclass
class CountingPacer(Pacer):
    """Pacer that only counts pauses."""

    pauses: int = 0

    async def pause(self) -> None:
        self.pauses += 1


@dataclass
class RecordingSleep:
    """Sleep replacement that records requested delays."""

    delays: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def make_booking(  # noqa: PLR0913
    booking_id: int,
    start_time: str = "13:00",
    end_time: str = "14:00",
    has_recording: bool = False,
    booking_date: date = TODAY,
    court_name: str = "Court 1",
) -> Booking:
    return Booking(
        booking_id=booking_id,
        booking_date=booking_date,
        court_name=court_name,
        camera_id=7,
        start_time=start_time,
        end_time=end_time,
        customer_name="Mario Rossi",
        has_recording=has_recording,
    )


def at(clock_time: str, day: date = TODAY) -> datetime:
    hour, minute = clock_time.split(":")
    return datetime(day.year, day.month, day.day, int(hour), int(minute))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        nas_host="nas.test",
        nas_password="nas-secret",
        booking_api_base_url="https://bookings.test/api",
        booking_api_password="service-secret",
        admin_token="admin-token",
    )


@pytest.fixture
def surveillance_client() -> FakeSurveillanceClient:
    return FakeSurveillanceClient()


@pytest.fixture
def session_manager(surveillance_client: FakeSurveillanceClient) -> SessionManager:
    return SessionManager(
        client=surveillance_client, account="replay", password="nas-secret"
    )


@pytest.fixture
def booking_source() -> FakeBookingSource:
    return FakeBookingSource()


@pytest.fixture
def container(
    settings: Settings,
    session_manager: SessionManager,
    booking_source: FakeBookingSource,
) -> AppContainer:
    locator = RecordingLocator(sessions=session_manager, timezone=settings.timezone)
    orchestrator = TransferOrchestrator(
        sessions=session_manager,
        poll_interval_seconds=settings.copy_poll_interval_seconds,
        max_attempts=settings.copy_max_attempts,
        sleep=RecordingSleep(),
    )
    acquisition_service = RecordingAcquisitionService(
        locator=locator,
        orchestrator=orchestrator,
        destination_folder=settings.destination_folder,
    )
    driver = AcquisitionDriver(
        booking_source=booking_source,
        clock=lambda: at("15:00"),
        pacer=CountingPacer(),
    )

    async def close_resources() -> None:
        await session_manager.logout_all()

    return AppContainer(
        settings=settings,
        booking_source=booking_source,
        session_manager=session_manager,
        recording_locator=locator,
        transfer_orchestrator=orchestrator,
        acquisition_service=acquisition_service,
        driver=driver,
        close_resources=close_resources,
    )
