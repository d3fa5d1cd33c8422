# apps/core/adapters/memory_gateway.py
import copy
from typing import Dict, List, Optional, Sequence

from apps.core.domain.query import KEY_FIELD, run_query
from apps.core.ports.gateway import IDocumentGateway, Predicate


class InMemoryDocumentGateway(IDocumentGateway):
    """Dict-backed store. Copies on the way in and out so callers never share state with it."""

    def __init__(self):
        self._collections: Dict[str, Dict[str, dict]] = {}

    def get(self, collection: str, key: str) -> Optional[dict]:
        doc = self._collections.get(collection, {}).get(key)
        if doc is None:
            return None
        return {**copy.deepcopy(doc), KEY_FIELD: key}

    def put(self, collection: str, key: str, document: dict, merge: bool = False) -> None:
        data = copy.deepcopy({k: v for k, v in document.items() if k != KEY_FIELD})
        bucket = self._collections.setdefault(collection, {})
        if merge and key in bucket:
            bucket[key].update(data)
        else:
            bucket[key] = data

    def delete(self, collection: str, key: str) -> None:
        self._collections.get(collection, {}).pop(key, None)

    def query(
        self,
        collection: str,
        predicates: Sequence[Predicate] = (),
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[dict]:
        documents = [
            {**copy.deepcopy(doc), KEY_FIELD: key}
            for key, doc in self._collections.get(collection, {}).items()
        ]
        return run_query(documents, predicates, order_by, limit)
