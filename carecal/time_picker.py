from __future__ import annotations

from dataclasses import dataclass, replace

from carecal import time_codec
from carecal.domain import MalformedTimeError, TimeOfDay

HOURS = tuple(f"{h:02d}" for h in range(1, 13))
# 15 min intervals
MINUTES = ("00", "15", "30", "45")
PERIODS = ("AM", "PM")

DEFAULT_HOUR = "09"
DEFAULT_MINUTE = "00"
DEFAULT_PERIOD = "AM"


def _pick(value: str, options: tuple[str, ...], field: str) -> str:
    # Empty clears the field.
    if value and value not in options:
        raise MalformedTimeError(f"Invalid {field} selection: {value!r}")
    return value


@dataclass(frozen=True)
class TimePickerState:
    """Hour/minute/period selections of the booking and reschedule time pickers.

    Any field may be empty; defaults (09:00 AM) fill empty fields when the
    selection is turned into a time.
    """

    hour: str = DEFAULT_HOUR
    minute: str = DEFAULT_MINUTE
    period: str = DEFAULT_PERIOD

    @classmethod
    def from_time(cls, value: TimeOfDay) -> TimePickerState:
        hour_part, rest = time_codec.encode(value).split(":", 1)
        minute_part, period = rest.split(" ", 1)
        return cls(hour=hour_part, minute=minute_part, period=period)

    @classmethod
    def prefill(cls, text: str | None) -> TimePickerState:
        """Pre-populate from an existing appointment time; defaults if it does not decode."""
        if not text:
            return cls()
        try:
            return cls.from_time(time_codec.decode(text))
        except MalformedTimeError:
            return cls()

    def with_hour(self, hour: str) -> TimePickerState:
        hour = hour.strip()
        # "9" and "09" are the same button.
        return replace(self, hour=_pick(hour.zfill(2) if hour else "", HOURS, "hour"))

    def with_minute(self, minute: str) -> TimePickerState:
        return replace(self, minute=_pick(minute.strip(), MINUTES, "minute"))

    def with_period(self, period: str) -> TimePickerState:
        return replace(self, period=_pick(period.strip().upper(), PERIODS, "period"))

    def resolved(self) -> TimePickerState:
        return TimePickerState(
            hour=self.hour or DEFAULT_HOUR,
            minute=self.minute or DEFAULT_MINUTE,
            period=self.period or DEFAULT_PERIOD,
        )

    def text(self) -> str:
        r = self.resolved()
        return f"{r.hour}:{r.minute} {r.period}"

    def to_time_of_day(self) -> TimeOfDay:
        # Always through the codec, so booking and reschedule agree.
        return time_codec.decode(self.text())

    def display(self) -> str:
        return time_codec.encode(self.to_time_of_day())
