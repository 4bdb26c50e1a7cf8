from __future__ import annotations

import logging
from typing import Any, Iterable

import httpx
from tenacity import RetryCallState, retry, retry_if_exception, stop_after_attempt, wait_exponential

from carecal import appointment_index, calendar_grid, time_codec
from carecal.api_client import fetch_appointment_records
from carecal.config import Settings
from carecal.domain import Appointment, AppointmentStatus, CalendarDate, TimeOfDay
from carecal.records_file import load_records

logger = logging.getLogger(__name__)


def _short_exc(retry_state: RetryCallState) -> str | None:
    if retry_state.outcome is None or not retry_state.outcome.failed:
        return None
    exc = retry_state.outcome.exception()
    if exc is None:
        return None
    msg = str(exc).strip()
    return f"{type(exc).__name__}: {msg}" if msg else type(exc).__name__


def _log_before_sleep(retry_state: RetryCallState) -> None:
    sleep_seconds = getattr(retry_state.next_action, "sleep", None)
    reason = _short_exc(retry_state)
    if sleep_seconds is None:
        logger.info("Fetch attempt %s failed (%s), retrying", retry_state.attempt_number, reason)
        return
    logger.info(
        "Fetch attempt %s failed (%s), retrying in %.0f s",
        retry_state.attempt_number,
        reason,
        sleep_seconds,
    )


def _is_transient(exc: BaseException) -> bool:
    # Network failures and 5xx are worth another try; 4xx (bad token, bad URL) are not.
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.TransportError)


def _fetch_once(settings: Settings) -> list[dict[str, Any]]:
    return fetch_appointment_records(
        url=settings.appointments_url,
        token=settings.api_token,
        timeout_seconds=settings.request_timeout_seconds,
    )


def _fetch_with_retry(settings: Settings) -> list[dict[str, Any]]:
    decorated = retry(
        stop=stop_after_attempt(settings.fetch_retry_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception(_is_transient),
        before_sleep=_log_before_sleep,
        reraise=True,
    )(_fetch_once)

    return decorated(settings)


def load_raw_records(settings: Settings) -> list[dict[str, Any]]:
    if settings.appointments_url:
        logger.info("Fetching appointments: %s", settings.appointments_url)
        return _fetch_with_retry(settings)

    logger.info("Reading appointments from %s", settings.appointments_file)
    return load_records(settings.appointments_file)


def load_appointments(settings: Settings) -> list[Appointment]:
    records = load_raw_records(settings)
    # Admin feeds may carry 24-hour times alongside the canonical 12-hour form.
    appointments, dropped = appointment_index.parse_appointments(records, decode=time_codec.decode_flexible)
    if dropped:
        logger.warning("Skipped %d appointment record(s) with unparseable date/time/status", dropped)
    logger.info("Loaded %d appointment(s)", len(appointments))
    return appointments


def render_day(
    appointments: Iterable[Appointment],
    date: CalendarDate,
    statuses: Iterable[AppointmentStatus | str] = (),
    duration_minutes: int | None = None,
) -> list[str]:
    selected = appointment_index.filter_by_status(appointment_index.by_date(appointments, date), statuses)
    if not selected:
        return [f"{date.iso()}: no appointments"]
    lines = [f"{date.iso()}: {len(selected)} appointment(s)"]
    if duration_minutes is None:
        for appt in selected:
            lines.append(f"  {time_codec.encode(appt.time)}  #{appt.id}  {appt.status.value}")
        return lines

    for event in appointment_index.to_calendar_events(selected, duration_minutes):
        start = time_codec.encode(event.appointment.time)
        end = time_codec.encode(TimeOfDay(event.end.hour, event.end.minute))
        lines.append(f"  {start}-{end}  #{event.appointment.id}  {event.appointment.status.value}")
    return lines


def render_month(appointments: Iterable[Appointment], year: int, month: int) -> list[str]:
    cells = calendar_grid.build(year, month)
    lines = [calendar_grid.month_title(year, month), " ".join(f"{label:>6}" for label in calendar_grid.WEEKDAY_LABELS)]

    cell_buckets = dict(appointment_index.attach_to_grid(cells, appointments))
    for week in calendar_grid.weeks(cells):
        row = []
        for cell in week:
            if not cell.in_focused_month:
                row.append(f"{'.':>6}")
                continue
            count = len(cell_buckets[cell].appointments)
            row.append(f"{cell.date.day:>3}" + (f"({count})" if count else "   "))
        lines.append(" ".join(row))
    return lines
