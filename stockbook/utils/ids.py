"""Identity and timestamp helpers shared by the domain models."""

import uuid
from datetime import datetime, timezone
from typing import Optional, Union


def generate_id() -> str:
    """Return a fresh, globally unique record id."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Optional[Union[str, datetime]]) -> Optional[datetime]:
    """Accept an ISO-8601 string or datetime, as stored in records."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value
