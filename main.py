import argparse
import datetime as dt
import logging

from carecal import time_codec
from carecal.agenda import load_appointments, render_day, render_month
from carecal.config import load_settings
from carecal.domain import CalendarDate, InvalidDateError, SchedulingError
from carecal.reschedule import ComparableInstant, plan_reschedule, validate_booking_date
from carecal.time_picker import TimePickerState


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def _parse_month(raw: str) -> tuple[int, int]:
    first = CalendarDate.from_iso(f"{raw.strip()}-01")
    return first.year, first.month


def _check_slot(date_raw: str, time_raw: str, now_dt: dt.datetime) -> int:
    now = ComparableInstant.from_datetime(now_dt)
    try:
        date = CalendarDate.from_iso(date_raw)
        validate_booking_date(date, now.date)
        picker = TimePickerState.from_time(time_codec.decode(time_raw))
        plan = plan_reschedule(None, date, picker, now)
    except SchedulingError as e:
        print(f"rejected: {type(e).__name__}: {e}")
        return 2
    print(f"ok: {plan.instant}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="carecal: appointment agenda and slot checks")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--date", help="Print the agenda for YYYY-MM-DD")
    group.add_argument("--month", help="Print the calendar grid for YYYY-MM")
    group.add_argument("--check", nargs=2, metavar=("DATE", "TIME"), help='Check a slot, e.g. 2024-03-10 "02:30 PM"')
    parser.add_argument("--status", action="append", default=[], help="Only show this status (repeatable)")
    parser.add_argument("--now", help="Reference time for --check (ISO datetime); defaults to the local clock")
    args = parser.parse_args()

    try:
        now_dt = dt.datetime.fromisoformat(args.now) if args.now else dt.datetime.now()
    except ValueError:
        parser.error(f"--now: invalid ISO datetime {args.now!r}")

    day = None
    year_month = None
    try:
        if args.date:
            day = CalendarDate.from_iso(args.date)
        elif args.month:
            year_month = _parse_month(args.month)
    except InvalidDateError as e:
        parser.error(str(e))

    _setup_logging()

    if args.check:
        return _check_slot(args.check[0], args.check[1], now_dt)

    settings = load_settings()
    appointments = load_appointments(settings)

    if day is not None:
        lines = render_day(
            appointments,
            day,
            args.status,
            duration_minutes=settings.event_duration_minutes,
        )
    else:
        lines = render_month(appointments, *year_month)

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
