# apps/core/adapters/orm_gateway.py
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from dateutil.parser import isoparse
from django.db import DatabaseError, transaction

from apps.core.domain.query import KEY_FIELD, run_query, validate_predicates
from apps.core.exceptions import PersistenceFailure
from apps.core.models import StoredDocument
from apps.core.ports.gateway import IDocumentGateway, Predicate

logger = logging.getLogger(__name__)

# JSONField only knows JSON types; richer values are stored tagged
DATETIME_TAG = '$datetime'
DATE_TAG = '$date'
DECIMAL_TAG = '$decimal'


def encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return {DATETIME_TAG: value.isoformat()}
    if isinstance(value, date):
        return {DATE_TAG: value.isoformat()}
    if isinstance(value, Decimal):
        return {DECIMAL_TAG: str(value)}
    if isinstance(value, dict):
        return {k: encode_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    return value


def decode_value(value: Any) -> Any:
    if isinstance(value, dict):
        if len(value) == 1:
            if DATETIME_TAG in value:
                return isoparse(value[DATETIME_TAG])
            if DATE_TAG in value:
                return date.fromisoformat(value[DATE_TAG])
            if DECIMAL_TAG in value:
                return Decimal(value[DECIMAL_TAG])
        return {k: decode_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [decode_value(v) for v in value]
    return value


class DjangoDocumentGateway(IDocumentGateway):
    """Document store kept in the StoredDocument table."""

    def _to_document(self, obj: StoredDocument) -> dict:
        return {**decode_value(obj.data), KEY_FIELD: obj.key}

    def get(self, collection: str, key: str) -> Optional[dict]:
        try:
            obj = StoredDocument.objects.get(collection=collection, key=key)
        except StoredDocument.DoesNotExist:
            return None
        except DatabaseError as exc:
            raise PersistenceFailure(f"get {collection}/{key} failed") from exc
        return self._to_document(obj)

    def put(self, collection: str, key: str, document: dict, merge: bool = False) -> None:
        data = encode_value({k: v for k, v in document.items() if k != KEY_FIELD})
        try:
            with transaction.atomic():
                if merge:
                    obj, created = StoredDocument.objects.select_for_update().get_or_create(
                        collection=collection, key=key, defaults={'data': data}
                    )
                    if not created:
                        obj.data = {**obj.data, **data}
                        obj.save(update_fields=['data', 'updated_at'])
                else:
                    StoredDocument.objects.update_or_create(
                        collection=collection, key=key, defaults={'data': data}
                    )
        except DatabaseError as exc:
            raise PersistenceFailure(f"put {collection}/{key} failed") from exc
        logger.debug("Stored %s/%s (merge=%s)", collection, key, merge)

    def delete(self, collection: str, key: str) -> None:
        try:
            StoredDocument.objects.filter(collection=collection, key=key).delete()
        except DatabaseError as exc:
            raise PersistenceFailure(f"delete {collection}/{key} failed") from exc

    def query(
        self,
        collection: str,
        predicates: Sequence[Predicate] = (),
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[dict]:
        validate_predicates(predicates)

        # String equality can be pushed down to the database;
        # everything else is filtered in Python after decoding.
        qs = StoredDocument.objects.filter(collection=collection)
        for field, op, value in predicates:
            if op == '==' and isinstance(value, str):
                qs = qs.filter(**{f'data__{field}': value})

        try:
            documents = [self._to_document(obj) for obj in qs]
        except DatabaseError as exc:
            raise PersistenceFailure(f"query {collection} failed") from exc

        return run_query(documents, predicates, order_by, limit)
