# apps/goals/domain/timeframes.py
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from dateutil.relativedelta import relativedelta, weekday

from apps.core.exceptions import ValidationError
from apps.goals.domain.entities import Timeframe

DateLike = Union[date, datetime]


@dataclass(frozen=True)
class TimeWindow:
    start_date: datetime
    end_date: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start_date <= moment <= self.end_date


@dataclass(frozen=True)
class CustomRange:
    start: Optional[DateLike] = None
    end: Optional[DateLike] = None


class TimeframeResolver:
    """
    Maps a symbolic timeframe to concrete [start, end] datetimes around `now`.

    Windows are inclusive: they start at 00:00 of the first day and end at
    23:59:59.999999 of the last one, in now's timezone.
    week_starts_on uses Python weekday numbering (0 = Monday, 6 = Sunday).
    """

    def __init__(self, week_starts_on: int = 6, custom_default_days: int = 30):
        if week_starts_on not in range(7):
            raise ValidationError(f"week_starts_on must be 0-6, got {week_starts_on}")
        self.week_starts_on = week_starts_on
        self.custom_default_days = custom_default_days

    def _at(self, day: date, clock: time, like: datetime) -> datetime:
        tz = like.tzinfo
        naive = datetime.combine(day, clock)
        if tz is None:
            return naive
        # pytz zones must localize, replace() would pick the LMT offset
        if hasattr(tz, 'localize'):
            return tz.localize(naive)
        return naive.replace(tzinfo=tz)

    def _window(self, first: date, last: date, now: datetime) -> TimeWindow:
        return TimeWindow(self._at(first, time.min, now), self._at(last, time.max, now))

    def _as_datetime(self, value: DateLike, now: datetime) -> datetime:
        if isinstance(value, datetime):
            return value
        return self._at(value, time.min, now)

    def week_bounds(self, day: date):
        first = day + relativedelta(weekday=weekday(self.week_starts_on)(-1))
        return first, first + timedelta(days=6)

    def resolve_window(self, timeframe, now: datetime, custom: Optional[CustomRange] = None) -> TimeWindow:
        try:
            timeframe = Timeframe(timeframe)
        except ValueError:
            raise ValidationError(f"Unknown timeframe: {timeframe!r}")

        today = now.date()

        if timeframe == Timeframe.WEEKLY:
            first, last = self.week_bounds(today)
            return self._window(first, last, now)

        if timeframe == Timeframe.MONTHLY:
            first = today.replace(day=1)
            last = first + relativedelta(months=1, days=-1)
            return self._window(first, last, now)

        if timeframe == Timeframe.YEARLY:
            return self._window(date(today.year, 1, 1), date(today.year, 12, 31), now)

        # CUSTOM: missing bounds default to now / now + N days.
        # start <= end is not checked here, callers decide.
        custom = custom or CustomRange()
        start = self._as_datetime(custom.start, now) if custom.start else now
        end = self._as_datetime(custom.end, now) if custom.end else now + timedelta(days=self.custom_default_days)
        return TimeWindow(start, end)

    def is_this_period(self, timeframe, moment: Optional[datetime], now: datetime) -> bool:
        """True when `moment` falls in the current week/month/year (custom windows are never 'current')."""
        if moment is None or Timeframe(timeframe) == Timeframe.CUSTOM:
            return False
        return self.resolve_window(timeframe, now).contains(moment)
