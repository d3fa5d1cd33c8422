# apps/expenses/domain/services.py
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from apps.core.exceptions import ValidationError
from apps.expenses.domain.entities import Transaction, TransactionType

PERIODS = ('all', 'this-month', 'last-month', 'last-3-months', 'custom')


@dataclass
class Summary:
    income: Decimal
    expenses: Decimal  # positive total of money spent
    balance: Decimal


def _month_bounds(moment: datetime):
    first = moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return first, first + relativedelta(months=1) - timedelta(microseconds=1)


def period_bounds(period: str, now: datetime, start: Optional[datetime] = None, end: Optional[datetime] = None):
    if period not in PERIODS:
        raise ValidationError(f"Unknown period: {period!r}")

    if period == 'this-month':
        return _month_bounds(now)
    if period == 'last-month':
        return _month_bounds(now - relativedelta(months=1))
    if period == 'last-3-months':
        return now - relativedelta(months=3), now
    if period == 'custom' and start and end:
        return start, end
    # 'all', or a custom range with a missing bound
    return None, None


def filter_transactions(
    transactions: Iterable[Transaction],
    now: datetime,
    type: str = 'all',
    period: str = 'all',
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[Transaction]:
    result = list(transactions)

    if type != 'all':
        wanted = TransactionType(type)
        result = [t for t in result if t.type == wanted]

    low, high = period_bounds(period, now, start, end)
    if low is not None:
        result = [t for t in result if low <= t.date <= high]

    return result


def summarize(transactions: Iterable[Transaction]) -> Summary:
    income = Decimal('0')
    expenses = Decimal('0')
    for t in transactions:
        if t.amount >= 0:
            income += t.amount
        else:
            expenses += -t.amount
    return Summary(income=income, expenses=expenses, balance=income - expenses)
