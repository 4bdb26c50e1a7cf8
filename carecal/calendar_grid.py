from __future__ import annotations

import datetime as dt

from carecal.domain import CalendarCell, CalendarDate, days_in_month, is_leap_year  # noqa: F401 re-exported

# Grid columns start on Sunday.
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def _check_month(year: int, month: int) -> None:
    # Raises InvalidDateError for a bad year/month pair.
    CalendarDate(year, month, 1)


def first_weekday(year: int, month: int) -> int:
    """Weekday of day 1 of the month, 0=Sunday..6=Saturday."""
    _check_month(year, month)
    return (dt.date(year, month, 1).weekday() + 1) % 7


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    _check_month(year, month)
    index = year * 12 + (month - 1) + delta
    new_year, new_month = divmod(index, 12)
    _check_month(new_year, new_month + 1)
    return new_year, new_month + 1


def build(year: int, month: int) -> list[CalendarCell]:
    """Cells for a month view: previous-month padding back to Sunday, then the month.

    No trailing padding is added, so the last week may be short.
    """
    leading = first_weekday(year, month)

    cells: list[CalendarCell] = []
    if leading:
        prev_year, prev_month = shift_month(year, month, -1)
        prev_last = days_in_month(prev_year, prev_month)
        for day in range(prev_last - leading + 1, prev_last + 1):
            cells.append(CalendarCell(date=CalendarDate(prev_year, prev_month, day), in_focused_month=False))

    for day in range(1, days_in_month(year, month) + 1):
        cells.append(CalendarCell(date=CalendarDate(year, month, day), in_focused_month=True))

    return cells


def weeks(cells: list[CalendarCell]) -> list[list[CalendarCell]]:
    return [cells[i : i + 7] for i in range(0, len(cells), 7)]


def is_selectable(cell: CalendarCell, today: CalendarDate) -> bool:
    # Padding cells and days before today cannot be booked.
    return cell.in_focused_month and cell.date >= today


def month_title(year: int, month: int) -> str:
    _check_month(year, month)
    return f"{_MONTH_NAMES[month - 1]} {year}"
