"""
Shared pure-utility functions for clickup-mcp.

These helpers have no business logic and no side effects.
They are used across client.py, resolver.py, and the formatters package.
"""

import json
from datetime import datetime, timezone

from clickup_mcp.exceptions import ValidationFailure


def _parse_ms_timestamp(ts):
    """Parse a ClickUp millisecond epoch (int or numeric string) into a datetime."""
    if ts is None or ts == "":
        return None
    try:
        return datetime.fromtimestamp(int(ts) / 1000, tz=timezone.utc)
    except (ValueError, TypeError, OverflowError):
        return None


def _iso_from_ms(ts):
    """Render a ClickUp millisecond epoch as an ISO-8601 string, or None."""
    parsed = _parse_ms_timestamp(ts)
    if parsed is None:
        return None
    return parsed.isoformat().replace("+00:00", "Z")


def _parse_date_ms(date_str):
    """Parse YYYY-MM-DD into a ClickUp millisecond epoch. Raises ValidationFailure."""
    try:
        parsed = datetime.strptime(date_str, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError as e:
        raise ValidationFailure(
            f"[ERROR] Invalid date '{date_str}'. Use YYYY-MM-DD format."
        ) from e
    return int(parsed.timestamp() * 1000)


def _to_json(data):
    """Compact JSON used for every tool payload."""
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def estimate_tokens(data):
    """Rough token estimate (~4 chars per token) of the serialized payload."""
    return (len(_to_json(data)) + 3) // 4


def _split_refs(raw):
    """Accept a list or a comma-separated string of references."""
    if raw is None:
        return []
    if isinstance(raw, str):
        return [v.strip() for v in raw.split(",") if v.strip()]
    return [str(v).strip() for v in raw if str(v).strip()]
