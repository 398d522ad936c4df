"""
# Logging Manager

Central place where the package obtains its loggers. Every module calls
`get_logger()` once at import time, optionally with a **prefix** that tags all
of its messages (`[DATABASE]`, `[DB_PERFORMANCE]`, `[CONNECTION_RESOLVER]`).

## Features

- **Prefixed loggers**: `get_logger(prefix="[DATABASE]")` returns an adapter that
  prepends the prefix to every message.
- **Correlation ids**: pass `extra={"correlation_id": ...}` (or the
  `correlation_id=` keyword) and the id is rendered in front of the message, so
  one logical operation can be followed across components.
- **TRACE level**: a level below `DEBUG` (numeric value 5) used for per-query
  messages that are too chatty for normal debugging.

## Usage

```python
from mongodb_persistence.managers.logging_manager import get_logger

db_logger = get_logger(prefix="[DATABASE]")

db_logger.debug("Connecting to mongodb", correlation_id="123")
db_logger.trace("Retrieved %d from %s", 5, "dummies", correlation_id="123")
# DEBUG mongodb_persistence [DATABASE] [123] Connecting to mongodb
```
"""

import logging
import sys
from typing import Any, Dict, MutableMapping, Optional, Tuple

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOGGER_NAME = "mongodb_persistence"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


class PrefixedLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that renders a static prefix and an optional correlation id.

    The adapter behaves like a regular `logging.Logger` (`debug`, `info`,
    `warning`, `error`, `exception`) and adds `trace()`. Each of these accepts a
    `correlation_id` keyword which is moved into the record's `extra` mapping.
    """

    def __init__(self, logger: logging.Logger, prefix: str = ""):
        super().__init__(logger, {"prefix": prefix})
        self.prefix = prefix

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra: Dict[str, Any] = dict(kwargs.get("extra") or {})
        correlation_id = kwargs.pop("correlation_id", None) or extra.get("correlation_id")
        extra["correlation_id"] = correlation_id
        extra.setdefault("prefix", self.prefix)
        kwargs["extra"] = extra

        parts = []
        if self.prefix:
            parts.append(self.prefix)
        if correlation_id:
            parts.append(f"[{correlation_id}]")
        parts.append(str(msg))
        return " ".join(parts), kwargs

    def trace(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        """Log a message at the TRACE level."""
        self.log(TRACE, msg, *args, **kwargs)


def configure_logging(level: Optional[str] = None, stream: Any = None) -> None:
    """
    Attach a stream handler to the package logger and set its level.

    Called lazily by `get_logger()`; call it explicitly to change the level at
    runtime. `level` falls back to `settings.LOG_LEVEL`.

    Args:
        level (`Optional[str]`): Level name such as `"DEBUG"` or `"TRACE"`.
        stream: Target stream for the handler. Defaults to `sys.stderr`.
    """
    global _configured

    if level is None:
        from mongodb_persistence.config import settings

        level = settings.LOG_LEVEL

    root = logging.getLogger(LOGGER_NAME)
    if not _configured:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        root.addHandler(handler)
        _configured = True

    resolved = logging.getLevelName(str(level).upper())
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)


def get_logger(name: Optional[str] = None, prefix: str = "") -> PrefixedLoggerAdapter:
    """
    Return a prefixed logger for the package.

    Args:
        name (`Optional[str]`): Child logger name below `mongodb_persistence`.
            Defaults to the package logger itself.
        prefix (`str`): Text rendered before every message, e.g. `"[DATABASE]"`.

    Returns:
        `PrefixedLoggerAdapter`: Adapter with `trace()` support.

    Example:
        ```python
        perf_logger = get_logger(prefix="[DB_PERFORMANCE]")
        perf_logger.info("Opened in %.3fs", 0.012)
        ```
    """
    if not _configured:
        configure_logging()

    logger_name = LOGGER_NAME if not name else f"{LOGGER_NAME}.{name}"
    return PrefixedLoggerAdapter(logging.getLogger(logger_name), prefix)
