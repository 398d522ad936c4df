"""
# MongoDB Persistence Lifecycle

`MongoDbPersistence` owns one Motor client bound to one named collection and
manages its lifecycle. CRUD operations live in `IdentifiableMongoDbPersistence`;
subclasses that need bespoke queries use the `collection` property directly.

## Lifecycle

```
UNOPENED ──open()──▶ OPENING ──ping ok──▶ OPEN ──close()──▶ CLOSING ──▶ CLOSED
                        │                                                │
                        └──────── connect failure (CONNECT_FAILED) ──────┘
```

1. **Construction**: no I/O. The collection name and model class are recorded.
2. **`configure(config)`**: merges the configuration over the defaults below and
   forwards the `connection(s)` / `credential(s)` sections to the resolver.
3. **`open(correlation_id)`**: resolves the URI, creates an `AsyncIOMotorClient`
   with the composed pool settings, pings the server and binds the collection.
4. **Operations**: borrow connections from the Motor pool.
5. **`close(correlation_id)`**: closes the client and releases every socket.

## Defaults

| Key | Default | Driver option |
|---|---|---|
| `options.max_pool_size` | 2 | `maxPoolSize` |
| `options.keep_alive` | 1 (s) | `heartbeatFrequencyMS` (x1000, min 500) |
| `options.connect_timeout` | 5000 (ms) | `connectTimeoutMS`, `serverSelectionTimeoutMS` |
| `options.auto_reconnect` | true | `retryReads`, `retryWrites` |
| `options.max_page_size` | 100 | paging limit, not sent to the driver |
| `options.debug` | true | logs the composed driver settings |
| `options.replica_set` | false | `directConnection=False` (also set when the URI names a `replicaSet`) |

## Usage

```python
persistence = MongoDbPersistence("dummies", Dummy)
persistence.configure(ConfigParams.from_tuples(
    "connection.host", "localhost",
    "connection.port", 27017,
    "connection.database", "test",
))
await persistence.open("123")
await persistence.collection.create_index("key")
await persistence.close("123")
```
"""

import time
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from mongodb_persistence.config import ConfigParams
from mongodb_persistence.connect.resolver import MongoDbConnectionResolver
from mongodb_persistence.errors import (
    CLEAR_FAILED,
    CONNECT_FAILED,
    DISCONNECT_FAILED,
    NO_COLLECTION,
    ConfigException,
    ConnectionException,
)
from mongodb_persistence.managers.logging_manager import get_logger
from mongodb_persistence.persistence.converters import (
    DictDocumentConverter,
    DocumentConverter,
    ModelDocumentConverter,
)

db_logger = get_logger(prefix="[DATABASE]")
perf_logger = get_logger(prefix="[DB_PERFORMANCE]")

DEFAULT_DATABASE = "test"
MIN_HEARTBEAT_FREQUENCY_MS = 500


class PersistenceState(str, Enum):
    """Connection state of a persistence component."""

    UNOPENED = "unopened"
    OPENING = "opening"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class MongoDbPersistence:
    """
    Base persistence component that stores data in a single MongoDB collection.

    Attributes:
        _collection_name (`Optional[str]`): Name of the bound collection.
        _model (`Optional[Type]`): Model class describing stored documents.
        _connection_resolver (`MongoDbConnectionResolver`): Composes the connection URI.
        _converter (`DocumentConverter`): Public/stored shape translation strategy.
        _options (`ConfigParams`): The `options.*` section after configuration.
        _client (`Optional[AsyncIOMotorClient]`): Motor client, `None` until opened.
        _database (`Optional[AsyncIOMotorDatabase]`): Selected database.
        _collection (`Optional[AsyncIOMotorCollection]`): Bound collection handle.

    Note:
        Calling operations before `open()` or after `close()` is a caller error;
        the `collection` property raises `ConnectionError` in that case.
    """

    _default_config: ConfigParams = ConfigParams.from_tuples(
        "collection", None,
        # connections.*
        # credential.*
        "options.max_pool_size", 2,
        "options.keep_alive", 1,
        "options.connect_timeout", 5000,
        "options.auto_reconnect", True,
        "options.max_page_size", 100,
        "options.debug", True,
        "options.replica_set", False,
    )

    def __init__(
        self,
        collection: Optional[str] = None,
        model: Optional[Type[Any]] = None,
        connection_resolver: Optional[MongoDbConnectionResolver] = None,
        converter: Optional[DocumentConverter] = None,
        logger: Optional[Any] = None,
    ):
        self._collection_name = collection
        self._model = model
        self._connection_resolver = connection_resolver or MongoDbConnectionResolver()
        if converter is None:
            converter = ModelDocumentConverter(model) if model is not None else DictDocumentConverter()
        self._converter = converter
        self._logger = logger or db_logger
        self._options = ConfigParams(self._default_config.get_section("options"))

        self._client: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = None
        self._database_name: Optional[str] = None
        self._collection: Optional[AsyncIOMotorCollection] = None
        self._state = PersistenceState.UNOPENED

    def configure(self, config: Mapping[str, Any]) -> None:
        """
        Configure the component.

        Defaults are applied first, then the resolver receives the `connection(s)`
        and `credential(s)` sections, the collection is rebound if its name changed
        and the model is known, and `options.*` override the current options.

        Args:
            config (`Mapping[str, Any]`): Flat configuration with dotted keys.
        """
        config = ConfigParams(config).set_defaults(self._default_config)

        self._connection_resolver.configure(config)

        collection = config.get_as_string_with_default("collection", self._collection_name)
        if collection != self._collection_name and self._model is not None:
            self._collection_name = collection
            if self._database is not None:
                self._collection = self._database[collection]

        self._options = self._options.override(config.get_section("options"))

    def set_references(self, references: Mapping[str, Any]) -> None:
        """
        Bind a logger and the resolver's discovery / credential-store collaborators.

        Args:
            references (`Mapping[str, Any]`): Components keyed by role: `"logger"`,
                `"discovery"`, `"credential-store"`. The logger must come from
                `get_logger()` since operations call `trace()` with `correlation_id=`.
        """
        logger = references.get("logger")
        if logger is not None:
            self._logger = logger
        self._connection_resolver.set_references(references)

    @property
    def state(self) -> PersistenceState:
        return self._state

    @property
    def collection_name(self) -> Optional[str]:
        return self._collection_name

    @property
    def database_name(self) -> Optional[str]:
        return self._database_name

    @property
    def client(self) -> Optional[AsyncIOMotorClient]:
        return self._client

    @property
    def collection(self) -> AsyncIOMotorCollection:
        """
        The bound Motor collection, for queries the generic operations do not cover.

        Raises:
            `ConnectionError`: If the persistence has not been opened.
        """
        if self._collection is None:
            self._logger.error(
                "Attempted to access collection '%s' without database connection", self._collection_name
            )
            raise ConnectionError("Database not connected. Call open() first.")
        return self._collection

    def is_open(self) -> bool:
        return self._state == PersistenceState.OPEN and self._client is not None

    # Shape conversion hooks; override or pass a converter to customize.
    def _convert_to_public(self, value: Any) -> Any:
        return self._converter.to_public(value)

    def _convert_to_public_partial(self, value: Any) -> Any:
        return self._converter.to_public_partial(value)

    def _convert_from_public(self, value: Any) -> Any:
        return self._converter.from_public(value)

    def _convert_from_public_partial(self, value: Any) -> Any:
        return self._converter.from_public_partial(value)

    def _compose_settings(self, replica_set: bool) -> Dict[str, Any]:
        max_pool_size = self._options.get_as_nullable_integer("max_pool_size")
        keep_alive = self._options.get_as_nullable_integer("keep_alive")
        connect_timeout = self._options.get_as_nullable_integer("connect_timeout")
        auto_reconnect = self._options.get_as_nullable_boolean("auto_reconnect")

        settings: Dict[str, Any] = {}
        if max_pool_size is not None:
            settings["maxPoolSize"] = max_pool_size
        if keep_alive:
            settings["heartbeatFrequencyMS"] = max(keep_alive * 1000, MIN_HEARTBEAT_FREQUENCY_MS)
        if connect_timeout is not None:
            settings["connectTimeoutMS"] = connect_timeout
            settings["serverSelectionTimeoutMS"] = connect_timeout
        if auto_reconnect is not None:
            settings["retryReads"] = auto_reconnect
            settings["retryWrites"] = auto_reconnect
        if replica_set:
            settings["directConnection"] = False

        return settings

    async def open(self, correlation_id: Optional[str]) -> None:
        """
        Resolve the connection URI and connect to MongoDB.

        The replica-set mode is used when `options.replica_set` is true or the URI
        contains `replicaSet`. The server is pinged before the component reports
        itself open. Calling `open()` on an open component reconnects.

        Args:
            correlation_id (`Optional[str]`): Id used to trace the call in logs.

        Raises:
            `ConfigException` / `ReferenceException`: The URI cannot be resolved.
            `ConnectionException`: `CONNECT_FAILED`, wrapping the driver error.
        """
        try:
            uri = await self._connection_resolver.resolve(correlation_id)
        except Exception as err:
            self._logger.error("Failed to resolve MongoDb connection: %s", err, correlation_id=correlation_id)
            raise

        if self._client is not None:
            self._client.close()
            self._client = None

        start_time = time.time()
        self._state = PersistenceState.OPENING
        self._logger.debug("Connecting to mongodb", correlation_id=correlation_id)

        replica_set = self._options.get_as_boolean("replica_set") or "replicaSet" in uri
        settings = self._compose_settings(replica_set)
        if self._options.get_as_boolean("debug"):
            self._logger.debug(
                "MongoDB connection settings - ReplicaSet: %s, MaxPageSize: %s, Driver: %s",
                replica_set,
                self._options.get_as_nullable_integer("max_page_size"),
                settings,
                correlation_id=correlation_id,
            )

        client: Optional[AsyncIOMotorClient] = None
        try:
            client = AsyncIOMotorClient(uri, **settings)
            await client.admin.command("ping")
            database = client.get_default_database(default=self._database_name or DEFAULT_DATABASE)
        except Exception as err:
            if client is not None:
                client.close()
            self._reset_handles()
            perf_logger.warning("Connection attempt failed after %.3fs", time.time() - start_time)
            raise ConnectionException(
                correlation_id, CONNECT_FAILED, "Connection to mongodb failed", cause=err
            ) from err

        self._client = client
        self._database = database
        self._database_name = database.name
        self._collection = database[self._collection_name] if self._collection_name else None
        self._state = PersistenceState.OPEN

        perf_logger.info("MongoDB connection established in %.3fs", time.time() - start_time)
        self._logger.debug(
            "Connected to mongodb database %s, collection %s",
            self._database_name,
            self._collection_name,
            correlation_id=correlation_id,
        )

    async def close(self, correlation_id: Optional[str]) -> None:
        """
        Disconnect from MongoDB.

        Closing a component that was never opened only logs a warning.

        Raises:
            `ConnectionException`: `DISCONNECT_FAILED`, wrapping the driver error.
        """
        if self._client is None:
            self._logger.warning(
                "Close called but no active MongoDB connection found", correlation_id=correlation_id
            )
            self._state = PersistenceState.CLOSED
            return

        start_time = time.time()
        self._state = PersistenceState.CLOSING
        try:
            self._client.close()
        except Exception as err:
            raise ConnectionException(
                correlation_id, DISCONNECT_FAILED, "Disconnect from mongodb failed", cause=err
            ) from err
        finally:
            self._reset_handles()

        perf_logger.info("MongoDB disconnection completed in %.3fs", time.time() - start_time)
        self._logger.debug(
            "Disconnected from mongodb database %s", self._database_name, correlation_id=correlation_id
        )

    def _reset_handles(self) -> None:
        self._client = None
        self._database = None
        self._collection = None
        self._state = PersistenceState.CLOSED

    async def clear(self, correlation_id: Optional[str]) -> None:
        """
        Remove every document from the bound collection.

        Raises:
            `ConfigException`: `NO_COLLECTION` when no collection name is set.
            `ConnectionException`: `CLEAR_FAILED`, wrapping the driver error.
        """
        if self._collection_name is None:
            raise ConfigException(correlation_id, NO_COLLECTION, "Collection name is not defined")

        try:
            result = await self.collection.delete_many({})
        except (PyMongoError, ConnectionError) as err:
            raise ConnectionException(
                correlation_id, CLEAR_FAILED, f"Clearing collection {self._collection_name} failed", cause=err
            ) from err

        self._logger.debug(
            "Cleared %d documents from %s", result.deleted_count, self._collection_name, correlation_id=correlation_id
        )
