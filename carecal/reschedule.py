from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from carecal import time_codec
from carecal.domain import CalendarDate, PastMomentError, TimeOfDay
from carecal.time_picker import TimePickerState


@dataclass(frozen=True, order=True)
class ComparableInstant:
    """Wall-clock moment ordered by year, month, day, then minutes since midnight."""

    year: int
    month: int
    day: int
    minutes: int

    @classmethod
    def from_datetime(cls, value: dt.datetime) -> ComparableInstant:
        # tzinfo is ignored: client-local wall-clock only.
        return compose_instant(CalendarDate.from_date(value.date()), TimeOfDay(value.hour, value.minute))

    @property
    def date(self) -> CalendarDate:
        return CalendarDate(self.year, self.month, self.day)

    @property
    def time(self) -> TimeOfDay:
        return time_codec.from_minutes(self.minutes)

    def to_datetime(self) -> dt.datetime:
        return dt.datetime(self.year, self.month, self.day, self.minutes // 60, self.minutes % 60)

    def __str__(self) -> str:
        return f"{self.date.iso()} {time_codec.encode(self.time)}"


@dataclass(frozen=True)
class ReschedulePlan:
    appointment_id: object
    instant: ComparableInstant
    payload: dict[str, str]


def compose_instant(date: CalendarDate, time: TimeOfDay) -> ComparableInstant:
    return ComparableInstant(date.year, date.month, date.day, time_codec.to_minutes(time))


def validate(candidate: ComparableInstant, now: ComparableInstant) -> None:
    """Raise PastMomentError unless ``candidate`` is strictly after ``now``."""
    if candidate <= now:
        raise PastMomentError(f"{candidate} is not after {now}")


def is_future(candidate: ComparableInstant, now: ComparableInstant) -> bool:
    return candidate > now


def validate_booking_date(date: CalendarDate, today: CalendarDate) -> None:
    # Booking by date only: today is still allowed.
    if date < today:
        raise PastMomentError(f"{date} is before {today}")


def build_reschedule_payload(date: CalendarDate, time: TimeOfDay) -> dict[str, str]:
    return {
        "appointment_date": date.iso(),
        "appointment_time": time_codec.encode(time),
    }


def plan_reschedule(
    appointment_id: object,
    date: CalendarDate,
    picker: TimePickerState,
    now: ComparableInstant,
) -> ReschedulePlan:
    """Compose the picked slot, check it is in the future and build the backend payload.

    Raises MalformedTimeError or PastMomentError.
    """
    time = picker.to_time_of_day()
    instant = compose_instant(date, time)
    validate(instant, now)
    return ReschedulePlan(
        appointment_id=appointment_id,
        instant=instant,
        payload=build_reschedule_payload(date, time),
    )
