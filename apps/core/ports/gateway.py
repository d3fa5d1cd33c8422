# apps/core/ports/gateway.py
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple, Any

Predicate = Tuple[str, str, Any]


class IDocumentGateway(ABC):
    """
    Generic document store the tracker persists through.

    Documents are plain dicts. Every backend error must surface as
    PersistenceFailure; a missing document is not an error for get/delete.
    """

    @abstractmethod
    def get(self, collection: str, key: str) -> Optional[dict]:
        pass

    @abstractmethod
    def put(self, collection: str, key: str, document: dict, merge: bool = False) -> None:
        """merge=True updates only the given top-level fields (creating the document if absent)."""
        pass

    @abstractmethod
    def delete(self, collection: str, key: str) -> None:
        pass

    @abstractmethod
    def query(
        self,
        collection: str,
        predicates: Sequence[Predicate] = (),
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[dict]:
        """
        Field-equality (and comparison) query.
        order_by is a field name, '-field' for descending.
        Every returned document carries its key under '_key'.
        """
        pass
