# apps/core/domain/query.py
import operator
from typing import Iterable, List, Optional, Sequence

from apps.core.exceptions import ValidationError

KEY_FIELD = '_key'

_OPERATORS = {
    '==': operator.eq,
    '!=': operator.ne,
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
    'in': lambda field_value, value: field_value in value,
    'array-contains': lambda field_value, value: isinstance(field_value, list) and value in field_value,
}

_MISSING = object()


def _matches_one(document: dict, field: str, op: str, value) -> bool:
    field_value = document.get(field, _MISSING)
    if field_value is _MISSING:
        # Missing fields never match, as in document databases
        return False
    try:
        return bool(_OPERATORS[op](field_value, value))
    except TypeError:
        # Incomparable types (e.g. None < date) simply do not match
        return False


def validate_predicates(predicates: Sequence) -> None:
    for predicate in predicates:
        if len(predicate) != 3:
            raise ValidationError(f"Predicate must be (field, op, value), got {predicate!r}")
        if predicate[1] not in _OPERATORS:
            raise ValidationError(f"Unsupported query operator: {predicate[1]!r}")


def run_query(
    documents: Iterable[dict],
    predicates: Sequence = (),
    order_by: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[dict]:
    validate_predicates(predicates)

    result = [
        doc for doc in documents
        if all(_matches_one(doc, field, op, value) for field, op, value in predicates)
    ]

    if order_by:
        descending = order_by.startswith('-')
        field = order_by.lstrip('-')
        # Documents without the field go first in ascending order
        present = [d for d in result if d.get(field) is not None]
        absent = [d for d in result if d.get(field) is None]
        present.sort(key=lambda d: d[field], reverse=descending)
        result = present + absent if descending else absent + present

    if limit is not None:
        result = result[:limit]
    return result
