"""
# Connection and Credential Descriptors

`ConnectionParams` and `CredentialParams` are `ConfigParams` with typed
accessors for the keys the resolver understands. Any other key they carry
(`replicaSet`, `authSource`, `ssl`, ...) is kept and later rendered as a URI
query parameter.

Configuration layout:

```
connection.host=localhost          # a single connection
connection.port=27017
connection.database=test

connections.node1.host=a           # several connections (replica set members)
connections.node1.port=27017
connections.node2.host=b
connections.node2.port=27018

credential.username=user           # a single credential
credential.password=pass
credential.store_key=mongo-creds   # or an indirection into a credential store
```
"""

from typing import Any, List, Mapping, Optional

from mongodb_persistence.config import ConfigParams


class ConnectionParams(ConfigParams):
    """
    Describes one database node, or a full connection string.

    A descriptor is valid when it has a literal `uri`, or when `host`, a non-zero
    `port` and `database` are all set. A descriptor with `discovery_key` is a
    placeholder that is replaced by whatever the discovery service returns.
    """

    @property
    def uri(self) -> Optional[str]:
        return self.get_as_nullable_string("uri")

    @property
    def host(self) -> Optional[str]:
        return self.get_as_nullable_string("host")

    @property
    def port(self) -> int:
        return self.get_as_integer_with_default("port", 0)

    @property
    def database(self) -> Optional[str]:
        return self.get_as_nullable_string("database")

    @property
    def protocol(self) -> Optional[str]:
        return self.get_as_nullable_string("protocol")

    @property
    def discovery_key(self) -> Optional[str]:
        return self.get_as_nullable_string("discovery_key")

    def use_discovery(self) -> bool:
        return bool(self.discovery_key)

    @classmethod
    def many_from_config(cls, config: Mapping[str, Any]) -> List["ConnectionParams"]:
        """
        Read every connection from `config`.

        All subsections of `connections` are returned in order of appearance; when
        there are none, the single `connection` section is used if it is not empty.
        """
        params = ConfigParams(config)
        result: List[ConnectionParams] = []

        connections = params.get_section("connections")
        for name in connections.get_section_names():
            section = connections.get_section(name)
            if section:
                result.append(cls(section))

        if not result:
            connection = params.get_section("connection")
            if connection:
                result.append(cls(connection))

        return result

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> Optional["ConnectionParams"]:
        connections = cls.many_from_config(config)
        return connections[0] if connections else None


class CredentialParams(ConfigParams):
    """
    Describes the credentials used to authenticate a connection.

    Credentials are not validated: a credential without a username simply adds no
    authentication prefix to the composed URI.
    """

    @property
    def username(self) -> Optional[str]:
        return self.get_as_nullable_string("username")

    @property
    def password(self) -> Optional[str]:
        return self.get_as_nullable_string("password")

    @property
    def store_key(self) -> Optional[str]:
        return self.get_as_nullable_string("store_key")

    @property
    def access_id(self) -> Optional[str]:
        return self.get_as_nullable_string("access_id") or self.get_as_nullable_string("client_id")

    @property
    def access_key(self) -> Optional[str]:
        return self.get_as_nullable_string("access_key") or self.get_as_nullable_string("client_key")

    def use_credential_store(self) -> bool:
        return bool(self.store_key)

    @classmethod
    def many_from_config(cls, config: Mapping[str, Any]) -> List["CredentialParams"]:
        """Read every credential from the `credentials` section, else the `credential` section."""
        params = ConfigParams(config)
        result: List[CredentialParams] = []

        credentials = params.get_section("credentials")
        for name in credentials.get_section_names():
            section = credentials.get_section(name)
            if section:
                result.append(cls(section))

        if not result:
            credential = params.get_section("credential")
            if credential:
                result.append(cls(credential))

        return result

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> Optional["CredentialParams"]:
        credentials = cls.many_from_config(config)
        return credentials[0] if credentials else None
