"""
# Configuration Module

Configuration for the MongoDB persistence components comes from two layers:

1. **`ConfigParams`**: a flat dictionary with dotted keys (`"connection.host"`,
   `"options.max_pool_size"`) that every component accepts in its `configure()`
   method. Sections are addressed by prefix and values are read through typed
   getters with defaults, so a component never has to care whether a value
   arrived as a string from an environment variable or as a native int.
2. **`Settings`**: a Pydantic `BaseSettings` model that reads `MONGODB_*`
   environment variables (optionally from a dotenv file) and converts them into
   `ConfigParams` with `settings.to_config_params()`.

## Configuration Sources (Priority Order)

- **Tier 1 (Highest)**: explicit `ConfigParams` passed to `configure()`
- **Tier 2**: environment variables (e.g., `export MONGODB_HOST="db1"`)
- **Tier 3**: dotenv file referenced by `MONGODB_PERSISTENCE_CONFIG_PATH`, else
  `.env` in the project root
- **Tier 4 (Lowest)**: component defaults (`options.max_pool_size=2`, ...)

## Recognized Keys

```
collection                  target collection name
connection(s).*             host, port, database, uri, protocol, discovery_key
credential(s).*             username, password, store_key, access_id, access_key
options.max_pool_size       default 2
options.keep_alive          default 1 (seconds)
options.connect_timeout     default 5000 (ms)
options.auto_reconnect      default true
options.max_page_size       default 100
options.debug               default true (persistence) / false (settings)
options.replica_set         default false
```

## Usage

```python
from mongodb_persistence.config import ConfigParams, settings

config = ConfigParams.from_tuples(
    "collection", "dummies",
    "connection.host", "localhost",
    "connection.port", 27017,
    "connection.database", "test",
)
config.get_section("connection").get_as_integer_with_default("port", 0)  # 27017

env_config = settings.to_config_params()
```
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Constants ---
DEFAULT_ENV_FILENAME: str = ".env"
CONFIG_ENV_VAR: str = "MONGODB_PERSISTENCE_CONFIG_PATH"
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent

_TRUE_VALUES = {"true", "1", "yes", "y", "t"}
_FALSE_VALUES = {"false", "0", "no", "n", "f"}


def _to_string(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_integer(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return int(value)
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError):
        return None


def _to_boolean(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


class ConfigParams(Dict[str, Any]):
    """
    Flat key-value configuration with dotted section keys.

    Keys keep their insertion order, which matters for components that serialize
    configuration back into strings (the connection resolver turns leftover
    connection keys into URI query parameters in this order).

    Example:
        ```python
        config = ConfigParams.from_value({"connection": {"host": "localhost", "port": 27017}})
        assert config == {"connection.host": "localhost", "connection.port": 27017}
        assert config.get_section("connection").get_as_nullable_string("host") == "localhost"
        ```
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        super().__init__()
        if values:
            for key, value in values.items():
                self[str(key)] = value

    @classmethod
    def from_tuples(cls, *tuples: Any) -> "ConfigParams":
        """Create config from alternating `key, value` arguments."""
        result = cls()
        for index in range(0, len(tuples) - 1, 2):
            result[str(tuples[index])] = tuples[index + 1]
        return result

    @classmethod
    def from_value(cls, value: Optional[Mapping[str, Any]]) -> "ConfigParams":
        """Create config from a nested mapping, flattening nested keys with dots."""
        result = cls()
        if value:
            cls._flatten(result, "", value)
        return result

    @classmethod
    def _flatten(cls, target: "ConfigParams", prefix: str, value: Any) -> None:
        if isinstance(value, Mapping):
            items = value.items()
        else:
            items = enumerate(value)

        for key, item in items:
            if isinstance(item, (Mapping, list, tuple)):
                cls._flatten(target, f"{prefix}{key}.", item)
            else:
                target[f"{prefix}{key}"] = item

    @classmethod
    def merge_configs(cls, *configs: Optional[Mapping[str, Any]]) -> "ConfigParams":
        """Merge several configs; later configs override earlier ones."""
        result = cls()
        for config in configs:
            if config:
                result.update(config)
        return result

    def get_section_names(self) -> List[str]:
        """Return top-level section names in order of first appearance."""
        names: List[str] = []
        for key in self.keys():
            name = key.split(".", 1)[0]
            if name and name not in names:
                names.append(name)
        return names

    def get_section(self, section: str) -> "ConfigParams":
        """Return the keys under `section.` with the prefix stripped."""
        prefix = f"{section}."
        result = ConfigParams()
        for key, value in self.items():
            if key.startswith(prefix) and len(key) > len(prefix):
                result[key[len(prefix):]] = value
        return result

    def add_section(self, section: str, values: Mapping[str, Any]) -> None:
        """Copy `values` into this config under the `section.` prefix."""
        for key, value in values.items():
            self[f"{section}.{key}" if section else key] = value

    def remove(self, key: str) -> None:
        self.pop(key, None)

    def get_as_nullable_string(self, key: str) -> Optional[str]:
        return _to_string(self.get(key))

    def get_as_string(self, key: str) -> str:
        return self.get_as_string_with_default(key, "")

    def get_as_string_with_default(self, key: str, default: Optional[str]) -> Optional[str]:
        value = self.get_as_nullable_string(key)
        return default if value is None else value

    def get_as_nullable_integer(self, key: str) -> Optional[int]:
        return _to_integer(self.get(key))

    def get_as_integer(self, key: str) -> int:
        return self.get_as_integer_with_default(key, 0)

    def get_as_integer_with_default(self, key: str, default: int) -> int:
        value = self.get_as_nullable_integer(key)
        return default if value is None else value

    def get_as_nullable_boolean(self, key: str) -> Optional[bool]:
        return _to_boolean(self.get(key))

    def get_as_boolean(self, key: str) -> bool:
        return self.get_as_boolean_with_default(key, False)

    def get_as_boolean_with_default(self, key: str, default: bool) -> bool:
        value = self.get_as_nullable_boolean(key)
        return default if value is None else value

    def set_defaults(self, defaults: Optional[Mapping[str, Any]]) -> "ConfigParams":
        """Return a new config where keys of this config win over `defaults`."""
        result = ConfigParams(defaults)
        result.update(self)
        return result

    def override(self, other: Optional[Mapping[str, Any]]) -> "ConfigParams":
        """Return a new config where keys of `other` win over this config."""
        result = ConfigParams(self)
        if other:
            result.update(other)
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict.__repr__(self)})"


# --- Config file discovery (no logging) ---
def get_config_path() -> Optional[str]:
    """
    Determines the dotenv file path based on a predefined precedence order.

    1.  **Environment Variable**: `MONGODB_PERSISTENCE_CONFIG_PATH` (if set and file exists).
    2.  **Dotenv Config**: `.env` file in the project root directory.
    3.  **Fallback**: Returns `None`, triggering environment-variable-only mode.

    Returns:
        Optional[str]: The path to the configuration file, or `None` if not found.
    """
    env_path: Optional[str] = os.environ.get(CONFIG_ENV_VAR)
    if env_path and os.path.exists(env_path):
        return env_path
    env_path_file: Path = PROJECT_ROOT / DEFAULT_ENV_FILENAME
    if env_path_file.exists():
        return str(env_path_file)
    return None


CONFIG_PATH: Optional[str] = get_config_path()
if CONFIG_PATH:
    load_dotenv(dotenv_path=CONFIG_PATH, override=False)


class Settings(BaseSettings):
    """
    Environment-driven defaults for MongoDB persistence components.

    **Configuration Groups:**
    *   **Connection**: `MONGODB_URI` or `MONGODB_HOST`/`MONGODB_PORT`/`MONGODB_DATABASE`.
    *   **Credentials**: `MONGODB_USERNAME`, `MONGODB_PASSWORD` (kept as `SecretStr`).
    *   **Options**: pool size, keep-alive, timeouts, paging limit, replica-set mode.
    *   **Logging**: `LOG_LEVEL`.
    """

    model_config = SettingsConfigDict(
        env_file=CONFIG_PATH if CONFIG_PATH else None,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Connection
    MONGODB_URI: Optional[str] = None
    MONGODB_HOST: str = "localhost"
    MONGODB_PORT: int = 27017
    MONGODB_DATABASE: str = "test"
    MONGODB_COLLECTION: Optional[str] = None

    # Authentication (optional)
    MONGODB_USERNAME: Optional[str] = None
    MONGODB_PASSWORD: Optional[SecretStr] = None

    # Options
    MONGODB_MAX_POOL_SIZE: int = 2
    MONGODB_KEEP_ALIVE: int = 1
    MONGODB_CONNECT_TIMEOUT: int = 5000
    MONGODB_AUTO_RECONNECT: bool = True
    MONGODB_MAX_PAGE_SIZE: int = 100
    MONGODB_DEBUG: bool = False
    MONGODB_REPLICA_SET: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("MONGODB_PORT", "MONGODB_MAX_POOL_SIZE", "MONGODB_MAX_PAGE_SIZE", mode="before")
    @classmethod
    def positive_numbers(cls, v: Any, info: Any) -> Any:
        """
        Validates that ports, pool sizes and page sizes are positive.

        Raises:
            ValueError: If the value is zero or negative.
        """
        if v is not None and str(v).strip() and int(v) <= 0:
            raise ValueError(f"{info.field_name} must be a positive integer")
        return v

    def to_config_params(self) -> ConfigParams:
        """
        Convert the settings into the `ConfigParams` accepted by `configure()`.

        A literal `MONGODB_URI` becomes `connection.uri`; otherwise host, port and
        database are emitted. Credentials are emitted only when a username is set.

        Returns:
            `ConfigParams`: Configuration with `connection.*`, `credential.*`,
                `collection` and `options.*` keys.
        """
        config = ConfigParams()
        if self.MONGODB_URI:
            config["connection.uri"] = self.MONGODB_URI
        else:
            config["connection.host"] = self.MONGODB_HOST
            config["connection.port"] = self.MONGODB_PORT
            config["connection.database"] = self.MONGODB_DATABASE

        if self.MONGODB_USERNAME:
            config["credential.username"] = self.MONGODB_USERNAME
            if self.MONGODB_PASSWORD is not None:
                config["credential.password"] = self.MONGODB_PASSWORD.get_secret_value()

        if self.MONGODB_COLLECTION:
            config["collection"] = self.MONGODB_COLLECTION

        config.add_section(
            "options",
            {
                "max_pool_size": self.MONGODB_MAX_POOL_SIZE,
                "keep_alive": self.MONGODB_KEEP_ALIVE,
                "connect_timeout": self.MONGODB_CONNECT_TIMEOUT,
                "auto_reconnect": self.MONGODB_AUTO_RECONNECT,
                "max_page_size": self.MONGODB_MAX_PAGE_SIZE,
                "debug": self.MONGODB_DEBUG,
                "replica_set": self.MONGODB_REPLICA_SET,
            },
        )
        return config


# Global settings instance
settings: Settings = Settings()
