from __future__ import annotations

from typing import Any

import httpx


def fetch_appointment_records(
    *,
    url: str,
    token: str | None = None,
    timeout_seconds: float = 20.0,
    transport: httpx.BaseTransport | None = None,
) -> list[dict[str, Any]]:
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    with httpx.Client(timeout=timeout_seconds, transport=transport) as client:
        r = client.get(url, headers=headers)
        r.raise_for_status()
        data = r.json()

    # The portal API wraps lists as {"status": true, "data": [...]}.
    if isinstance(data, dict):
        if data.get("status") is False:
            raise RuntimeError(f"Appointments API error: {data}")
        data = data.get("data", [])
    if not isinstance(data, list):
        raise RuntimeError(f"Unexpected appointments payload: {type(data).__name__}")
    return [item for item in data if isinstance(item, dict)]
