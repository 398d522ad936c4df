"""
# MongoDB Persistence

Asynchronous persistence components over MongoDB (Motor). Subclass
`IdentifiableMongoDbPersistence` to get paging, filtering, sorting and CRUD for
a Pydantic model with an `id` field.

```python
from mongodb_persistence import ConfigParams, IdentifiableMongoDbPersistence, IdentifiableModel


class Dummy(IdentifiableModel[str]):
    key: str
    content: str = ""


class DummyMongoDbPersistence(IdentifiableMongoDbPersistence[Dummy, str]):
    def __init__(self):
        super().__init__("dummies", Dummy)


persistence = DummyMongoDbPersistence()
persistence.configure(ConfigParams.from_tuples(
    "connection.host", "localhost",
    "connection.port", 27017,
    "connection.database", "test",
))
await persistence.open("123")
dummy = await persistence.create("123", Dummy(key="a", content="first"))
```
"""

from mongodb_persistence.config import ConfigParams, Settings, settings
from mongodb_persistence.connect import (
    ConnectionParams,
    CredentialParams,
    CredentialStore,
    Discovery,
    MemoryCredentialStore,
    MemoryDiscovery,
    MongoDbConnectionResolver,
)
from mongodb_persistence.data import DataPage, IdentifiableModel, IdGenerator, PagingParams
from mongodb_persistence.errors import (
    ApplicationException,
    ConfigException,
    ConnectionException,
    ReferenceException,
)
from mongodb_persistence.persistence import (
    DictDocumentConverter,
    DocumentConverter,
    IdentifiableMongoDbPersistence,
    ModelDocumentConverter,
    MongoDbPersistence,
    PersistenceState,
)

__version__ = "0.1.0"

__all__ = [
    "ApplicationException",
    "ConfigException",
    "ConfigParams",
    "ConnectionException",
    "ConnectionParams",
    "CredentialParams",
    "CredentialStore",
    "DataPage",
    "DictDocumentConverter",
    "Discovery",
    "DocumentConverter",
    "IdGenerator",
    "IdentifiableModel",
    "IdentifiableMongoDbPersistence",
    "MemoryCredentialStore",
    "MemoryDiscovery",
    "ModelDocumentConverter",
    "MongoDbConnectionResolver",
    "MongoDbPersistence",
    "PagingParams",
    "PersistenceState",
    "ReferenceException",
    "Settings",
    "settings",
]
