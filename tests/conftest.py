from unittest.mock import AsyncMock, MagicMock

import pytest

from mongodb_persistence import PersistenceState
from tests.fixtures.dummy import DummyMongoDbPersistence


def make_cursor(documents=None):
    """Motor cursor double: `skip`/`limit`/`sort` chain, `to_list` is awaited."""
    cursor = MagicMock()
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=list(documents or []))
    return cursor


@pytest.fixture
def mock_collection():
    collection = MagicMock()
    collection.find.return_value = make_cursor()
    collection.find_one = AsyncMock(return_value=None)
    collection.count_documents = AsyncMock(return_value=0)
    collection.insert_one = AsyncMock()
    collection.find_one_and_replace = AsyncMock(return_value=None)
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.find_one_and_delete = AsyncMock(return_value=None)
    collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
    return collection


@pytest.fixture
def persistence(mock_collection):
    """A `DummyMongoDbPersistence` bound to a mocked collection, as if it had been opened."""
    persistence = DummyMongoDbPersistence(id_generator=lambda: "generated-id")
    persistence._collection = mock_collection
    persistence._state = PersistenceState.OPEN
    return persistence
