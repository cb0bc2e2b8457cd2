"""Booking snapshots read from the booking collaborator."""

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

DEFAULT_TIMEZONE = "Europe/Rome"


class Booking(BaseModel):
    """A reserved court slot, as reported by the booking source.

    Validation context keys:
      - `default_date`: date used when the payload carries no booking date.
      - `timezone`: zone used to take the local date of a timestamp.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    booking_id: int | str = Field(validation_alias=AliasChoices("booking_id", "id"))
    booking_date: date
    court_name: str = ""
    sport_type: str | None = None
    camera_id: int | str | None = None
    start_time: str
    end_time: str
    customer_name: str | None = None
    has_recording: bool = Field(
        default=False, validation_alias=AliasChoices("has_recording", "has_video")
    )

    @model_validator(mode="before")
    @classmethod
    def _default_booking_date(cls, data: object, info: ValidationInfo) -> object:
        if isinstance(data, dict) and not data.get("booking_date"):
            default_date = (info.context or {}).get("default_date")
            if default_date is not None:
                return {**data, "booking_date": default_date}
        return data

    @field_validator("booking_date", mode="before")
    @classmethod
    def _local_date(cls, value: object, info: ValidationInfo) -> object:
        # Database drivers serialize DATE columns as midnight UTC timestamps.
        if isinstance(value, str) and len(value) > 10:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                timezone = (info.context or {}).get("timezone", DEFAULT_TIMEZONE)
                value = value.astimezone(ZoneInfo(timezone))
            return value.date()
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def _valid_clock_time(cls, value: str) -> str:
        clock_minutes(value)
        return value

    @property
    def starts_at(self) -> datetime:
        """Naive local datetime of the start of the slot."""
        return at_clock(self.booking_date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        """Naive local datetime of the end of the slot."""
        return at_clock(self.booking_date, self.end_time)

    def describe(self) -> str:
        customer = self.customer_name or "unknown customer"
        return f"{self.court_name} {self.start_time}-{self.end_time} ({customer})"


def clock_minutes(value: str) -> int:
    """Minutes after midnight for `HH:MM` or `HH:MM:SS`; seconds are dropped.

    `24:00` is accepted as the end of the day.
    """
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid clock time: {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 24 and 0 <= minute < 60) or (hour == 24 and minute):
        raise ValueError(f"Clock time out of range: {value!r}")
    return hour * 60 + minute


def at_clock(day: date, value: str) -> datetime:
    """Combine a date with a clock time; `24:00` rolls over to the next day."""
    return datetime.combine(day, time()) + timedelta(minutes=clock_minutes(value))


class AutoDownloadResult(BaseModel):
    """Outcome reported by the collaborator auto-download operation."""

    model_config = ConfigDict(extra="ignore")

    success: bool = False
    filename: str | None = None
    file_size: int | None = None
    error: str | None = None

    @property
    def file_size_mb(self) -> float:
        return round((self.file_size or 0) / 1024 / 1024, 2)
