# tests/conftest.py
from datetime import datetime

import pytest
import pytz

from apps.core.adapters.memory_gateway import InMemoryDocumentGateway
from apps.core.exceptions import PersistenceFailure

USER_ID = 'user1'
NOW = datetime(2024, 3, 15, 10, 30, tzinfo=pytz.UTC)


class FailingGateway(InMemoryDocumentGateway):
    """Reads work, every write fails (network down, quota exceeded...)."""

    def put(self, collection, key, document, merge=False):
        raise PersistenceFailure(f"put {collection}/{key} failed")

    def delete(self, collection, key):
        raise PersistenceFailure(f"delete {collection}/{key} failed")


@pytest.fixture
def gateway():
    return InMemoryDocumentGateway()


@pytest.fixture
def user_id():
    return USER_ID


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


class RecordingGateway(InMemoryDocumentGateway):
    """Keeps a log of every write as (operation, collection, key)."""

    def __init__(self):
        super().__init__()
        self.writes = []

    def put(self, collection, key, document, merge=False):
        self.writes.append(('put', collection, key))
        super().put(collection, key, document, merge=merge)

    def delete(self, collection, key):
        self.writes.append(('delete', collection, key))
        super().delete(collection, key)
