"""Sample model, persistence and shared CRUD scenarios used across the test suite."""

from tests.fixtures.dummy import Dummy, DummyMongoDbPersistence
from tests.fixtures.persistence_fixture import PersistenceFixture

__all__ = ["Dummy", "DummyMongoDbPersistence", "PersistenceFixture"]
