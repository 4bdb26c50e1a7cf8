from __future__ import annotations

from unittest.mock import patch

import pytest

import main
from carecal.appointment_index import parse_appointment
from carecal.config import Settings
from carecal.domain import CalendarDate
from carecal.time_picker import TimePickerState


def _args(**values):
    base = {"date": None, "month": None, "check": None, "status": [], "now": None}
    base.update(values)
    return type("Args", (), base)()


def _appointments():
    return [
        parse_appointment({"id": 1, "date": "2024-03-10", "time": "2:00 PM"}),
        parse_appointment({"id": 2, "date": "2024-03-10", "time": "9:00 AM"}),
    ]


def test_main_prints_day_agenda(capsys: pytest.CaptureFixture[str]) -> None:
    with (
        patch("main.load_settings", return_value=Settings()),
        patch("main.load_appointments", return_value=_appointments()) as load,
        patch("main.argparse.ArgumentParser.parse_args", return_value=_args(date="2024-03-10")),
    ):
        assert main.main() == 0
        load.assert_called_once_with(Settings())

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "2024-03-10: 2 appointment(s)",
        "  09:00 AM-10:00 AM  #2  pending",
        "  02:00 PM-03:00 PM  #1  pending",
    ]


def test_main_prints_month_grid(capsys: pytest.CaptureFixture[str]) -> None:
    with (
        patch("main.load_settings", return_value=Settings()),
        patch("main.load_appointments", return_value=_appointments()),
        patch("main.render_month", wraps=main.render_month) as render,
        patch("main.argparse.ArgumentParser.parse_args", return_value=_args(month="2024-03")),
    ):
        assert main.main() == 0
        assert render.call_args.args[1:] == (2024, 3)

    assert capsys.readouterr().out.splitlines()[0] == "March 2024"


def test_check_accepts_future_slot_without_loading_appointments(capsys: pytest.CaptureFixture[str]) -> None:
    with (
        patch("main.load_appointments") as load,
        patch(
            "main.argparse.ArgumentParser.parse_args",
            return_value=_args(check=["2024-03-10", "02:30 PM"], now="2024-03-10T14:00"),
        ),
    ):
        assert main.main() == 0
        load.assert_not_called()

    assert capsys.readouterr().out.strip() == "ok: 2024-03-10 02:30 PM"


@pytest.mark.parametrize(
    "check, expected",
    [
        (["2024-03-10", "02:00 PM"], "PastMomentError"),
        (["2024-03-10", "2:00"], "MalformedTimeError"),
        (["2024-02-30", "02:00 PM"], "InvalidDateError"),
    ],
)
def test_check_rejects_with_exit_code_2(capsys: pytest.CaptureFixture[str], check: list[str], expected: str) -> None:
    with patch(
        "main.argparse.ArgumentParser.parse_args",
        return_value=_args(check=check, now="2024-03-10T14:00"),
    ):
        assert main.main() == 2

    assert expected in capsys.readouterr().out


def test_parse_month() -> None:
    assert main._parse_month("2024-02") == (2024, 2)
    assert main._parse_month(" 2024-12 ") == (2024, 12)


def test_check_goes_through_reschedule_planning(capsys: pytest.CaptureFixture[str]) -> None:
    with (
        patch("main.plan_reschedule", wraps=main.plan_reschedule) as plan,
        patch("main.validate_booking_date", wraps=main.validate_booking_date) as booking,
        patch(
            "main.argparse.ArgumentParser.parse_args",
            return_value=_args(check=["2024-03-11", "9:20 AM"], now="2024-03-10T14:00"),
        ),
    ):
        assert main.main() == 0
        booking.assert_called_once_with(CalendarDate(2024, 3, 11), CalendarDate(2024, 3, 10))
        picker = plan.call_args.args[2]
        assert picker == TimePickerState(hour="09", minute="20", period="AM")

    assert capsys.readouterr().out.strip() == "ok: 2024-03-11 09:20 AM"


def test_check_rejects_day_before_today(capsys: pytest.CaptureFixture[str]) -> None:
    with patch(
        "main.argparse.ArgumentParser.parse_args",
        return_value=_args(check=["2024-03-09", "11:00 PM"], now="2024-03-10T14:00"),
    ):
        assert main.main() == 2

    assert "PastMomentError" in capsys.readouterr().out


@pytest.mark.parametrize(
    "values",
    [
        {"check": ["2024-03-10", "02:30 PM"], "now": "yesterday"},
        {"date": "2024-02-30"},
        {"date": "10/03/2024"},
        {"month": "2024-13"},
    ],
)
def test_bad_arguments_exit_with_usage_error(capsys: pytest.CaptureFixture[str], values: dict) -> None:
    with (
        patch("main.load_settings") as settings,
        patch("main.argparse.ArgumentParser.parse_args", return_value=_args(**values)),
        pytest.raises(SystemExit) as exc_info,
    ):
        main.main()

    assert exc_info.value.code == 2
    settings.assert_not_called()
    assert "error:" in capsys.readouterr().err
