# apps/expenses/domain/entities.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    EXPENSE = 'expense'
    INCOME = 'income'


@dataclass
class Transaction:
    id: Optional[str]
    date: datetime
    amount: Decimal  # signed: negative for expenses, positive for income
    note: str
    type: TransactionType = TransactionType.EXPENSE
    created_at: Optional[datetime] = None


def signed_amount(amount: Decimal, transaction_type: TransactionType) -> Decimal:
    amount = abs(Decimal(amount))
    return amount if TransactionType(transaction_type) == TransactionType.INCOME else -amount
