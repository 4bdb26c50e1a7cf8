from __future__ import annotations

import pytest

from carecal.domain import MalformedTimeError, TimeOfDay
from carecal.time_picker import HOURS, MINUTES, PERIODS, TimePickerState


def test_defaults_to_nine_am() -> None:
    state = TimePickerState()
    assert state.display() == "09:00 AM"
    assert state.to_time_of_day() == TimeOfDay(9, 0)


def test_each_transition_returns_a_new_record() -> None:
    start = TimePickerState()
    changed = start.with_hour("2").with_minute("30").with_period("pm")

    assert start == TimePickerState()
    assert changed == TimePickerState(hour="02", minute="30", period="PM")
    assert changed.display() == "02:30 PM"


def test_empty_fields_fall_back_to_defaults() -> None:
    state = TimePickerState().with_hour("11").with_minute("").with_period("")
    assert state.text() == "11:00 AM"
    assert state.to_time_of_day() == TimeOfDay(11, 0)

    assert TimePickerState(hour="", minute="", period="").display() == "09:00 AM"


@pytest.mark.parametrize(
    "method, value",
    [("with_hour", "13"), ("with_hour", "00"), ("with_minute", "10"), ("with_period", "XM")],
)
def test_rejects_values_outside_the_option_lists(method: str, value: str) -> None:
    with pytest.raises(MalformedTimeError):
        getattr(TimePickerState(), method)(value)


def test_prefill_from_existing_appointment_time() -> None:
    assert TimePickerState.prefill("2:45 PM") == TimePickerState(hour="02", minute="45", period="PM")
    assert TimePickerState.prefill("12:00 AM") == TimePickerState(hour="12", minute="00", period="AM")
    assert TimePickerState.prefill("12:15 PM") == TimePickerState(hour="12", minute="15", period="PM")


@pytest.mark.parametrize("text", [None, "", "14:00", "later"])
def test_prefill_falls_back_to_defaults(text: str | None) -> None:
    assert TimePickerState.prefill(text) == TimePickerState()


def test_from_time_round_trips_through_the_codec() -> None:
    for hour in range(24):
        t = TimeOfDay(hour, 45)
        assert TimePickerState.from_time(t).to_time_of_day() == t


def test_option_lists() -> None:
    assert HOURS[0] == "01" and HOURS[-1] == "12" and len(HOURS) == 12
    assert MINUTES == ("00", "15", "30", "45")
    assert PERIODS == ("AM", "PM")
