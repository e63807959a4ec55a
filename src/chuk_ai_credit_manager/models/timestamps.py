# chuk_ai_credit_manager/models/timestamps.py
"""Timezone-aware timestamp type shared by the persisted records."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


# Stored data written by older clients may lack an offset.
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
