"""Date/instant parsing helpers for rental intervals."""
from datetime import datetime, date, time

import pytz

from ..exceptions import InvalidDateRangeError


def parse_instant(value) -> datetime:
    """
    Parse a date/datetime (or string) into a UTC-aware datetime.
    Supports:
      - 'YYYY-MM-DD' (midnight)
      - 'YYYY-MM-DD HH:MM[:SS]'
      - 'YYYY-MM-DDTHH:MM[:SS]'
      - Above with 'Z' or timezone offsets like '+03:00'
    Naive values are taken as UTC. Raise InvalidDateRangeError on bad input.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        # Normalize: handle 'T' and trailing 'Z'
        s_norm = value.strip().replace("T", " ")
        if s_norm.endswith("Z"):
            s_norm = s_norm[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s_norm)
        except ValueError:
            raise InvalidDateRangeError(f"Invalid date: {value!r}") from None
    else:
        raise InvalidDateRangeError(f"Invalid date: {value!r}")

    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def utc_now() -> datetime:
    """Wrapper for easier testing/mocking."""
    return datetime.now(pytz.utc)
