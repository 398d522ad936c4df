"""Process-wide managers shared by the persistence components."""

from mongodb_persistence.managers.logging_manager import TRACE, configure_logging, get_logger

__all__ = ["TRACE", "configure_logging", "get_logger"]
