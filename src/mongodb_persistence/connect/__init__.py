"""Connection descriptors, discovery/credential collaborators and the MongoDB URI resolver."""

from mongodb_persistence.connect.discovery import (
    CredentialStore,
    Discovery,
    MemoryCredentialStore,
    MemoryDiscovery,
)
from mongodb_persistence.connect.params import ConnectionParams, CredentialParams
from mongodb_persistence.connect.resolver import MongoDbConnectionResolver

__all__ = [
    "ConnectionParams",
    "CredentialParams",
    "CredentialStore",
    "Discovery",
    "MemoryCredentialStore",
    "MemoryDiscovery",
    "MongoDbConnectionResolver",
]
