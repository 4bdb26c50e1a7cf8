from __future__ import annotations

import datetime as dt
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Union

from carecal import time_codec
from carecal.domain import (
    Appointment,
    AppointmentStatus,
    CalendarCell,
    CalendarDate,
    DayBucket,
    TimeOfDay,
)

AppointmentLike = Union[Appointment, Mapping[str, object]]
TimeDecoder = Callable[[str], TimeOfDay]


@dataclass(frozen=True)
class CalendarEvent:
    appointment: Appointment
    start: dt.datetime
    end: dt.datetime


def _field(record: Mapping[str, object], *names: str) -> object:
    for name in names:
        if name in record and record[name] not in (None, ""):
            return record[name]
    raise KeyError(names[0])


def parse_appointment(record: Mapping[str, object], decode: TimeDecoder = time_codec.decode) -> Appointment:
    """Build an Appointment from a backend record.

    Accepts both ``date``/``time`` and ``appointment_date``/``appointment_time``
    key names. A missing status means ``pending``. Pass
    ``time_codec.decode_flexible`` as ``decode`` for admin feeds that mix in
    24-hour times.
    """
    date = CalendarDate.from_iso(str(_field(record, "date", "appointment_date")))
    time = decode(str(_field(record, "time", "appointment_time")))
    raw_status = record.get("status") or AppointmentStatus.PENDING.value
    return Appointment(
        id=record.get("id"),
        date=date,
        time=time,
        status=AppointmentStatus.parse(raw_status),
    )


def _coerce(item: AppointmentLike, decode: TimeDecoder) -> Appointment | None:
    if isinstance(item, Appointment):
        return item
    try:
        return parse_appointment(item, decode)
    except (AttributeError, KeyError, TypeError, ValueError):
        return None


def parse_appointments(
    records: Iterable[AppointmentLike], decode: TimeDecoder = time_codec.decode
) -> tuple[list[Appointment], int]:
    """Parse records, dropping the ones that do not parse.

    Returns the parsed appointments (input order) and the number dropped.
    """
    parsed: list[Appointment] = []
    dropped = 0
    for item in records:
        appt = _coerce(item, decode)
        if appt is None:
            dropped += 1
            continue
        parsed.append(appt)
    return parsed, dropped


def _sort_by_time(appointments: Iterable[Appointment]) -> list[Appointment]:
    # sorted() is stable: equal times keep their input order.
    return sorted(appointments, key=lambda a: time_codec.to_minutes(a.time))


def by_date(appointments: Iterable[AppointmentLike], date: CalendarDate) -> list[Appointment]:
    parsed, _ = parse_appointments(appointments)
    return _sort_by_time(a for a in parsed if a.date == date)


def group_by_date(appointments: Iterable[AppointmentLike]) -> list[DayBucket]:
    parsed, _ = parse_appointments(appointments)

    grouped: dict[CalendarDate, list[Appointment]] = {}
    for appt in parsed:
        grouped.setdefault(appt.date, []).append(appt)

    return [DayBucket(date=d, appointments=tuple(_sort_by_time(grouped[d]))) for d in sorted(grouped)]


def attach_to_grid(
    cells: Iterable[CalendarCell], appointments: Iterable[AppointmentLike]
) -> list[tuple[CalendarCell, DayBucket]]:
    buckets = {b.date: b for b in group_by_date(appointments)}
    return [(cell, buckets.get(cell.date, DayBucket(date=cell.date, appointments=()))) for cell in cells]


def filter_by_status(
    appointments: Iterable[Appointment], statuses: Iterable[AppointmentStatus | str]
) -> list[Appointment]:
    wanted = {AppointmentStatus.parse(s) for s in statuses}
    if not wanted:
        return list(appointments)
    return [a for a in appointments if a.status in wanted]


def to_calendar_events(appointments: Iterable[Appointment], duration_minutes: int = 60) -> list[CalendarEvent]:
    if duration_minutes < 1:
        raise ValueError("duration_minutes must be >= 1")

    events: list[CalendarEvent] = []
    for appt in appointments:
        start = dt.datetime.combine(appt.date.to_date(), dt.time(appt.time.hour, appt.time.minute))
        events.append(CalendarEvent(appointment=appt, start=start, end=start + dt.timedelta(minutes=duration_minutes)))
    return events
