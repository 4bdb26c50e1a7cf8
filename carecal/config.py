from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    # REST endpoint returning appointment records; when unset we read appointments_file.
    appointments_url: str | None = None
    api_token: str | None = None

    appointments_file: str = "appointments.json"

    # How many times we allow the HTTP fetch to be retried on failure.
    fetch_retry_attempts: int = 3
    request_timeout_seconds: float = 20.0

    # Admin calendar events have no end time in the records.
    event_duration_minutes: int = 60


def _optional(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def _int_env(name: str, default: str, *, minimum: int) -> int:
    raw = os.getenv(name, default).strip()
    try:
        value = int(raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid {name} value: {raw!r}. Expected integer.") from e
    if value < minimum:
        raise RuntimeError(f"{name} must be >= {minimum}")
    return value


def load_settings(dotenv_path: str | None = None) -> Settings:
    # Prefer .env in repo root; dotenv_path allows overriding in tests.
    load_dotenv(dotenv_path=dotenv_path, override=False)

    timeout_raw = os.getenv("CARECAL_REQUEST_TIMEOUT_SECONDS", "20").strip()
    try:
        request_timeout_seconds = float(timeout_raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid CARECAL_REQUEST_TIMEOUT_SECONDS value: {timeout_raw!r}") from e
    if request_timeout_seconds <= 0:
        raise RuntimeError("CARECAL_REQUEST_TIMEOUT_SECONDS must be > 0")

    return Settings(
        appointments_url=_optional("CARECAL_APPOINTMENTS_URL"),
        api_token=_optional("CARECAL_API_TOKEN"),
        appointments_file=os.getenv("CARECAL_APPOINTMENTS_FILE", "appointments.json"),
        fetch_retry_attempts=_int_env("CARECAL_FETCH_RETRY_ATTEMPTS", "3", minimum=1),
        request_timeout_seconds=request_timeout_seconds,
        event_duration_minutes=_int_env("CARECAL_EVENT_DURATION_MINUTES", "60", minimum=1),
    )
