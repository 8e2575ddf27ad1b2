"""Packaged resources for boardmode."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Dict

__all__ = ["load_telemetry_schema"]


@lru_cache(maxsize=1)
def load_telemetry_schema() -> Dict[str, Any]:
    """Return the JSON schema telemetry records are validated against."""

    entry = resources.files(__name__) / "telemetry.schema.json"
    return json.loads(entry.read_text("utf-8"))
