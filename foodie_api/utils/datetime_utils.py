# foodie_api/utils/datetime_utils.py
"""
Central place for time handling.

- Everything the backend stores or compares is a timezone-aware UTC datetime.
- ISO-8601 strings (``...Z``) are what clients see and what they send back as cursors.
- Firestore returns ``DatetimeWithNanoseconds``; ``from_firestore`` normalises those.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """UTC-only datetime helpers shared by services and schemas."""

    @staticmethod
    def now() -> datetime:
        """Current time as a UTC timezone-aware datetime."""
        return datetime.now(timezone.utc)

    @staticmethod
    def epoch_millis(dt: datetime) -> int:
        """Milliseconds since the epoch, used to build post identifiers."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return int(dt.timestamp() * 1000)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        Parse an ISO string into a UTC datetime.

        Accepted:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00.123456Z
        - 2024-01-15T10:30:00 (assumed UTC)
        """
        try:
            if not iso_string:
                raise ValueError("empty string")

            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return dt.astimezone(timezone.utc)

        except (ValueError, OverflowError, TypeError) as e:
            logger.error(f"ISO datetime parse failed: {iso_string!r} - {e}")
            raise ValueError(f"Invalid ISO datetime: {iso_string}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """UTC ISO string with a ``Z`` suffix."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        else:
            dt = dt.astimezone(timezone.utc)
        return dt.isoformat().replace('+00:00', 'Z')

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """Normalise datetimes read back from Firestore to plain UTC datetimes."""
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        elif isinstance(obj, dict):
            return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [DateTimeUtils.from_firestore(item) for item in obj]
        return obj
