"""
Property catalog loader.

The catalog is a local JSON file (default: `data/catalogs/properties.json`) holding
a list of listing records as exported by the property store. Records are resolved
leniently through `coerce_property` (a bad field degrades, it does not reject the
record); only a file that is not a JSON list is an error.
"""

from __future__ import annotations

import json
from pathlib import Path

from stayscore.core.env import resolve_project_path
from stayscore.domain.models import Property, coerce_property


def load_properties(path: str | Path) -> list[Property]:
    """Load a property catalog JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    if isinstance(payload, dict) and isinstance(payload.get("properties"), list):
        payload = payload["properties"]
    if not isinstance(payload, list):
        raise ValueError(f"Invalid catalog root in {resolved}; expected a list of properties.")
    return [coerce_property(record) for record in payload if record is not None]
