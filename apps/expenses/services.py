# apps/expenses/services.py
import logging
import uuid
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, List

from django.utils import timezone

from apps.core.domain.keys import make_key, split_key
from apps.core.domain.query import KEY_FIELD
from apps.core.domain.timestamps import coerce_datetime
from apps.core.exceptions import ValidationError
from apps.core.ports.gateway import IDocumentGateway
from apps.expenses.domain.entities import Transaction, TransactionType, signed_amount

logger = logging.getLogger(__name__)

COLLECTION = 'transactions'


class ExpenseService:
    def __init__(self, gateway: IDocumentGateway, clock: Callable[[], datetime] = timezone.now):
        self.gateway = gateway
        self.clock = clock

    def to_entity(self, user_id: str, doc: dict) -> Transaction:
        return Transaction(
            id=split_key(user_id, doc[KEY_FIELD]),
            date=coerce_datetime(doc.get('date')),
            amount=Decimal(str(doc.get('amount', 0))),
            note=doc.get('note', ""),
            type=TransactionType(doc.get('type', TransactionType.EXPENSE.value)),
            created_at=coerce_datetime(doc.get('createdAt')),
        )

    def list_transactions(self, user_id: str) -> List[Transaction]:
        docs = self.gateway.query(COLLECTION, [('userId', '==', user_id)], order_by='-date')
        return [self.to_entity(user_id, d) for d in docs]

    def add_transaction(self, user_id: str, date, amount, note: str, type=TransactionType.EXPENSE) -> Transaction:
        if amount in (None, "") or not (note or "").strip():
            raise ValidationError("Amount and note are required")
        try:
            value = Decimal(str(amount))
        except InvalidOperation:
            raise ValidationError(f"Invalid amount: {amount!r}")
        try:
            transaction_type = TransactionType(type)
        except ValueError:
            raise ValidationError(f"Unknown transaction type: {type!r}")

        transaction = Transaction(
            id=f"transaction_{uuid.uuid4().hex}",
            date=coerce_datetime(date) if date else self.clock(),
            amount=signed_amount(value, transaction_type),
            note=note.strip(),
            type=transaction_type,
            created_at=self.clock(),
        )

        self.gateway.put(COLLECTION, make_key(user_id, transaction.id), {
            'date': transaction.date,
            'amount': transaction.amount,
            'note': transaction.note,
            'type': transaction.type.value,
            'userId': user_id,
            'createdAt': transaction.created_at,
        })
        return transaction

    def delete_transaction(self, user_id: str, transaction_id: str) -> None:
        self.gateway.delete(COLLECTION, make_key(user_id, transaction_id))

    def clear_all(self, user_id: str) -> int:
        """Deletes every transaction of the user, returns how many were removed."""
        keys = [d[KEY_FIELD] for d in self.gateway.query(COLLECTION, [('userId', '==', user_id)])]
        for key in keys:
            self.gateway.delete(COLLECTION, key)
        logger.info("Cleared %d transactions for user %s", len(keys), user_id)
        return len(keys)
