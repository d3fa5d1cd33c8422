# apps/journal/services.py
import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional

from django.utils import timezone

from apps.core.domain.keys import make_key, split_key
from apps.core.domain.query import KEY_FIELD
from apps.core.domain.timestamps import coerce_datetime
from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.ports.gateway import IDocumentGateway
from apps.journal.domain.entities import JournalEntry

logger = logging.getLogger(__name__)

COLLECTION = 'journalEntries'


class JournalService:
    def __init__(self, gateway: IDocumentGateway, clock: Callable[[], datetime] = timezone.now):
        self.gateway = gateway
        self.clock = clock

    def to_entity(self, user_id: str, doc: dict) -> JournalEntry:
        return JournalEntry(
            id=split_key(user_id, doc[KEY_FIELD]),
            title=doc.get('title', ""),
            content=doc.get('content', ""),
            tags=list(doc.get('tags') or []),
            linked_goals=list(doc.get('linkedGoals') or []),
            date=coerce_datetime(doc.get('date')),
            created_at=coerce_datetime(doc.get('createdAt')),
            updated_at=coerce_datetime(doc.get('updatedAt')),
        )

    def to_document(self, user_id: str, entry: JournalEntry) -> dict:
        return {
            'title': entry.title,
            'content': entry.content,
            'tags': list(entry.tags),
            'linkedGoals': list(entry.linked_goals),
            'userId': user_id,
            'date': entry.date,
            'createdAt': entry.created_at,
            'updatedAt': entry.updated_at,
        }

    def _validate(self, entry: JournalEntry):
        if not (entry.title or "").strip() and not (entry.content or "").strip():
            raise ValidationError("Journal entry needs a title or some content")

    def list_entries(self, user_id: str, limit: Optional[int] = None) -> List[JournalEntry]:
        docs = self.gateway.query(COLLECTION, [('userId', '==', user_id)], order_by='-date', limit=limit)
        return [self.to_entity(user_id, d) for d in docs]

    def get_entry(self, user_id: str, entry_id: str) -> JournalEntry:
        doc = self.gateway.get(COLLECTION, make_key(user_id, entry_id))
        if doc is None:
            raise NotFoundError(COLLECTION, entry_id)
        return self.to_entity(user_id, doc)

    def create_entry(self, user_id: str, entry: JournalEntry) -> JournalEntry:
        self._validate(entry)
        now = self.clock()
        entry = replace(entry, id=f"entry_{uuid.uuid4().hex}", date=now, created_at=now, updated_at=now)

        self.gateway.put(COLLECTION, make_key(user_id, entry.id), self.to_document(user_id, entry))
        logger.info("Journal entry %s created for user %s", entry.id, user_id)
        return entry

    def update_entry(self, user_id: str, entry: JournalEntry) -> JournalEntry:
        self._validate(entry)
        existing = self.get_entry(user_id, entry.id)
        # The entry keeps its original date
        entry = replace(entry, date=existing.date, created_at=existing.created_at, updated_at=self.clock())

        self.gateway.put(COLLECTION, make_key(user_id, entry.id), self.to_document(user_id, entry), merge=True)
        return entry

    def delete_entry(self, user_id: str, entry_id: str) -> None:
        self.gateway.delete(COLLECTION, make_key(user_id, entry_id))
        logger.info("Journal entry %s deleted for user %s", entry_id, user_id)
