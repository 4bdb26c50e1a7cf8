from __future__ import annotations

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)


def load_records(path: str) -> list[dict[str, Any]]:
    """Read appointment records from ``{"appointments": [...]}`` or a bare JSON list."""
    if not os.path.exists(path):
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError:
        # A broken export shouldn't take the agenda down; show nothing.
        logger.warning("Appointments file %s is not valid JSON, ignoring", path)
        return []

    if isinstance(raw, dict):
        raw = raw.get("appointments", [])
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]

