"""
# Discovery and Credential Stores

Interfaces of the registries that resolve `discovery_key` and `store_key`
indirections, plus in-memory implementations that are configured from
`ConfigParams`. Real deployments plug in their own service registry or secret
store by implementing the same two coroutines.

In-memory configuration layout (every top-level section is one key):

```
mongo.host=db1                # MemoryDiscovery: key "mongo" -> one connection
mongo.port=27017
mongo.database=app

mongo-creds.username=app      # MemoryCredentialStore: key "mongo-creds"
mongo-creds.password=secret
```
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, runtime_checkable

from mongodb_persistence.config import ConfigParams
from mongodb_persistence.connect.params import ConnectionParams, CredentialParams
from mongodb_persistence.managers.logging_manager import get_logger

logger = get_logger(prefix="[DISCOVERY]")


@runtime_checkable
class Discovery(Protocol):
    """Resolves a discovery key into one or more connection descriptors."""

    async def resolve_all(self, correlation_id: Optional[str], key: str) -> List[ConnectionParams]:
        ...


@runtime_checkable
class CredentialStore(Protocol):
    """Resolves a store key into a credential descriptor."""

    async def lookup(self, correlation_id: Optional[str], key: str) -> Optional[CredentialParams]:
        ...


class MemoryDiscovery:
    """
    Discovery service backed by an in-process dictionary.

    Example:
        ```python
        discovery = MemoryDiscovery()
        discovery.configure(ConfigParams.from_tuples("mongo.host", "db1", "mongo.port", 27017))
        await discovery.resolve_all("123", "mongo")  # [ConnectionParams({"host": "db1", ...})]
        ```
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self._items: Dict[str, List[ConnectionParams]] = {}
        if config is not None:
            self.configure(config)

    def configure(self, config: Mapping[str, Any]) -> None:
        params = ConfigParams(config)
        for key in params.get_section_names():
            self.register(key, ConnectionParams(params.get_section(key)))

    def register(self, key: str, connection: Mapping[str, Any]) -> None:
        self._items.setdefault(key, []).append(ConnectionParams(connection))

    async def resolve_all(self, correlation_id: Optional[str], key: str) -> List[ConnectionParams]:
        connections = [ConnectionParams(item) for item in self._items.get(key, [])]
        logger.trace("Resolved %d connections for key %s", len(connections), key, correlation_id=correlation_id)
        return connections


class MemoryCredentialStore:
    """Credential store backed by an in-process dictionary."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self._items: Dict[str, CredentialParams] = {}
        if config is not None:
            self.configure(config)

    def configure(self, config: Mapping[str, Any]) -> None:
        params = ConfigParams(config)
        for key in params.get_section_names():
            self.store(key, CredentialParams(params.get_section(key)))

    def store(self, key: str, credential: Optional[Mapping[str, Any]]) -> None:
        if credential is None:
            self._items.pop(key, None)
        else:
            self._items[key] = CredentialParams(credential)

    async def lookup(self, correlation_id: Optional[str], key: str) -> Optional[CredentialParams]:
        credential = self._items.get(key)
        return CredentialParams(credential) if credential is not None else None
