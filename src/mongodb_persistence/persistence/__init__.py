"""MongoDB persistence components: lifecycle, CRUD and document shape conversion."""

from mongodb_persistence.persistence.base import MongoDbPersistence, PersistenceState
from mongodb_persistence.persistence.converters import (
    DictDocumentConverter,
    DocumentConverter,
    ModelDocumentConverter,
)
from mongodb_persistence.persistence.identifiable import IdentifiableMongoDbPersistence

__all__ = [
    "DictDocumentConverter",
    "DocumentConverter",
    "IdentifiableMongoDbPersistence",
    "ModelDocumentConverter",
    "MongoDbPersistence",
    "PersistenceState",
]
