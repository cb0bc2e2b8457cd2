"""Domain models for recordings held by the surveillance system."""

from dataclasses import dataclass
from datetime import date

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from replay_acquisition.domain.bookings import clock_minutes


@dataclass(frozen=True)
class RecordingQuery:
    """Camera id and a [start, end) window in epoch seconds."""

    camera_id: int | str
    from_time: int
    to_time: int


class RecordingMatch(BaseModel):
    """A recording descriptor from the catalog."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int | str | None = Field(
        default=None, validation_alias=AliasChoices("id", "eventId")
    )
    folder: str = ""
    path: str = ""
    name: str | None = None
    start_time: int | None = Field(
        default=None, validation_alias=AliasChoices("startTime", "start_time")
    )
    stop_time: int | None = Field(
        default=None,
        validation_alias=AliasChoices("stopTime", "stop_time", "endTime", "end_time"),
    )

    @property
    def source_path(self) -> str:
        return f"{self.folder.rstrip('/')}/{self.path.lstrip('/')}"

    @property
    def file_name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


class Camera(BaseModel):
    """Camera known to the surveillance system."""

    model_config = ConfigDict(extra="ignore")

    id: int | str
    name: str = Field(default="", validation_alias=AliasChoices("newName", "name"))
    status: int | None = None


class AcquisitionRequest(BaseModel):
    """Booking window to fetch a recording for."""

    camera_id: int | str
    booking_date: date
    start_time: str
    end_time: str
    booking_id: int | str | None = None
    court_name: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _valid_clock_time(cls, value: str) -> str:
        clock_minutes(value)
        return value


@dataclass(frozen=True)
class AcquisitionResult:
    """A recording copied into delivery storage."""

    filename: str
    source_path: str
    destination_path: str
    recording: RecordingMatch
