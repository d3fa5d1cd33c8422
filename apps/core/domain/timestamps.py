# apps/core/domain/timestamps.py
from datetime import date, datetime, time
from typing import Any, Optional

from dateutil.parser import isoparse
from django.utils import timezone


def make_aware(value: datetime) -> datetime:
    if timezone.is_naive(value):
        return timezone.make_aware(value, timezone.get_current_timezone())
    return value


def coerce_datetime(value: Any) -> Optional[datetime]:
    """
    Turns whatever a document store hands back into an aware datetime.

    Accepts datetime, date, ISO-8601 strings and backend timestamp wrappers
    exposing to_date() / toDate().
    """
    if value is None:
        return None

    # Backend timestamp wrappers
    for accessor in ('to_date', 'toDate'):
        if hasattr(value, accessor):
            value = getattr(value, accessor)()
            break

    if isinstance(value, datetime):
        return make_aware(value)
    if isinstance(value, date):
        return make_aware(datetime.combine(value, time.min))
    if isinstance(value, str):
        return make_aware(isoparse(value))

    raise TypeError(f"Cannot interpret {value!r} as a timestamp")
