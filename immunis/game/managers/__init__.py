"""Manager systems shared by the combat subsystems."""

from .log_manager import LogManager, LogLevel, LogCategory, LogMessage

__all__ = [
    "LogManager",
    "LogLevel",
    "LogCategory",
    "LogMessage",
]
