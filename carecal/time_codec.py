"""Conversion between canonical 12-hour time text and TimeOfDay.

Canonical text is ``H:MM AM|PM`` or ``HH:MM AM|PM`` (e.g. ``"9:00 AM"``,
``"02:30 PM"``). ``encode`` always emits the zero-padded form.
"""

from __future__ import annotations

import re

from carecal.domain import MalformedTimeError, TimeOfDay

_MERIDIEMS = ("AM", "PM")

_TWELVE_HOUR_RE = re.compile(r"^(\d{1,2})(?::(\d{1,2}))?\s*([A-Za-z]*)$")
_TWENTY_FOUR_HOUR_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def decode(text: str) -> TimeOfDay:
    if not isinstance(text, str):
        raise MalformedTimeError(f"Expected time text, got {type(text).__name__}")

    m = _TWELVE_HOUR_RE.match(text.strip())
    if not m:
        raise MalformedTimeError(f"Malformed time: {text!r}")

    hour = int(m.group(1))
    minute = int(m.group(2)) if m.group(2) else 0
    meridiem = m.group(3).upper()

    if meridiem not in _MERIDIEMS:
        raise MalformedTimeError(f"Missing or unrecognized AM/PM marker in {text!r}")
    if not 1 <= hour <= 12:
        raise MalformedTimeError(f"Hour must be 1-12 in {text!r}")
    if not 0 <= minute <= 59:
        raise MalformedTimeError(f"Minute must be 0-59 in {text!r}")

    # 12 AM is midnight, 12 PM is noon.
    if meridiem == "AM":
        hour = 0 if hour == 12 else hour
    else:
        hour = hour if hour == 12 else hour + 12

    return TimeOfDay(hour=hour, minute=minute)


def decode_flexible(text: str) -> TimeOfDay:
    """Decode canonical 12-hour text, falling back to 24-hour ``HH:MM``."""
    try:
        return decode(text)
    except MalformedTimeError:
        m = _TWENTY_FOUR_HOUR_RE.match(text.strip()) if isinstance(text, str) else None
        if not m:
            raise
    return TimeOfDay(hour=int(m.group(1)), minute=int(m.group(2)))


def encode(value: TimeOfDay) -> str:
    hour12 = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{hour12:02d}:{value.minute:02d} {meridiem}"


def to_minutes(value: TimeOfDay) -> int:
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> TimeOfDay:
    if not 0 <= minutes <= 1439:
        raise MalformedTimeError(f"Minutes since midnight out of range: {minutes!r}")
    return TimeOfDay(hour=minutes // 60, minute=minutes % 60)


def compare(a: TimeOfDay, b: TimeOfDay) -> int:
    left, right = to_minutes(a), to_minutes(b)
    return (left > right) - (left < right)
