# apps/journal/domain/services.py
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from dateutil.relativedelta import relativedelta

from apps.core.exceptions import ValidationError
from apps.journal.domain.entities import JournalEntry

PERIODS = ('all', 'today', 'week', 'month', 'three-months', 'custom')


def period_bounds(period: str, now: datetime, start: Optional[datetime] = None, end: Optional[datetime] = None):
    """(start, end) for a journal date filter; (None, None) means no filtering."""
    if period not in PERIODS:
        raise ValidationError(f"Unknown period: {period!r}")

    if period == 'today':
        return (now.replace(hour=0, minute=0, second=0, microsecond=0),
                now.replace(hour=23, minute=59, second=59, microsecond=999999))
    if period == 'week':
        return now - timedelta(days=7), now
    if period == 'month':
        first = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        return first, first + relativedelta(months=1) - timedelta(microseconds=1)
    if period == 'three-months':
        return now - relativedelta(months=3), now
    if period == 'custom' and start and end:
        return start, end
    return None, None


def filter_entries(
    entries: Iterable[JournalEntry],
    now: datetime,
    search: str = "",
    tags: Sequence[str] = (),
    period: str = 'all',
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[JournalEntry]:
    result = list(entries)

    # Search in title and content, case-insensitive
    if search:
        needle = search.lower()
        result = [e for e in result if needle in (e.title or "").lower() or needle in (e.content or "").lower()]

    # Any of the selected tags
    if tags:
        wanted = set(tags)
        result = [e for e in result if wanted.intersection(e.tags)]

    low, high = period_bounds(period, now, start, end)
    if low is not None:
        result = [e for e in result if e.date is not None and low <= e.date <= high]

    return result


def resolve_linked_goals(entry: JournalEntry, goals_by_id: dict) -> list:
    """Goals the entry links to; ids of deleted goals are skipped."""
    return [goals_by_id[goal_id] for goal_id in entry.linked_goals if goal_id in goals_by_id]


def journal_streak(dates: Iterable[datetime], today: date) -> int:
    """Number of consecutive days with an entry, counting back from today."""
    days = {d.date() if isinstance(d, datetime) else d for d in dates if d is not None}
    streak = 0
    current = today
    while current in days:
        streak += 1
        current -= timedelta(days=1)
    return streak
