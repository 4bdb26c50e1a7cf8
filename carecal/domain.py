from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from enum import Enum

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


class SchedulingError(ValueError):
    """Base class for recoverable, value-level scheduling errors."""


class MalformedTimeError(SchedulingError):
    """Time text cannot be decoded, or hour/minute/meridiem is out of range."""


class InvalidDateError(SchedulingError):
    """Day/month combination is not a real calendar date."""


class PastMomentError(SchedulingError):
    """Candidate moment is not strictly after the reference "now"."""


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if month == 2:
        return 29 if is_leap_year(year) else 28
    if month in (4, 6, 9, 11):
        return 30
    return 31


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """24-hour wall-clock time without timezone."""

    hour: int
    minute: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.hour, int) or not 0 <= self.hour <= 23:
            raise MalformedTimeError(f"Hour out of range: {self.hour!r}")
        if not isinstance(self.minute, int) or not 0 <= self.minute <= 59:
            raise MalformedTimeError(f"Minute out of range: {self.minute!r}")


@dataclass(frozen=True, order=True)
class CalendarDate:
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        if not isinstance(self.year, int) or not 1 <= self.year <= 9999:
            raise InvalidDateError(f"Year out of range: {self.year!r}")
        if not isinstance(self.month, int) or not 1 <= self.month <= 12:
            raise InvalidDateError(f"Month out of range: {self.month!r}")
        if not isinstance(self.day, int) or not 1 <= self.day <= days_in_month(self.year, self.month):
            raise InvalidDateError(f"Invalid day {self.day!r} for {self.year:04d}-{self.month:02d}")

    @classmethod
    def from_iso(cls, text: str) -> CalendarDate:
        # Exactly YYYY-MM-DD (surrounding whitespace allowed); no time or timezone part.
        m = _ISO_DATE_RE.match(text.strip()) if isinstance(text, str) else None
        if not m:
            raise InvalidDateError(f"Invalid date: {text!r}. Expected YYYY-MM-DD")
        return cls(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    @classmethod
    def from_date(cls, value: dt.date) -> CalendarDate:
        return cls(value.year, value.month, value.day)

    def to_date(self) -> dt.date:
        return dt.date(self.year, self.month, self.day)

    def iso(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def __str__(self) -> str:
        return self.iso()


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"

    @classmethod
    def parse(cls, raw: AppointmentStatus | str) -> AppointmentStatus:
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError as e:
            raise ValueError(f"Unknown appointment status: {raw!r}") from e


@dataclass(frozen=True)
class CalendarCell:
    date: CalendarDate
    in_focused_month: bool


@dataclass(frozen=True)
class Appointment:
    """Read-only view of a backend appointment record."""

    id: object
    date: CalendarDate
    time: TimeOfDay
    status: AppointmentStatus = AppointmentStatus.PENDING


@dataclass(frozen=True)
class DayBucket:
    date: CalendarDate
    appointments: tuple[Appointment, ...]
