"""
Log management system for combat diagnostics.

This module provides centralized logging with categorization, filtering,
and bounded in-memory storage. It is separate from the combat log entries
that form part of a combat result.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()     # Engine lifecycle, catalog loading
    BATTLE = auto()     # Combat-related messages
    AI = auto()         # Target selection decisions
    MEMORY = auto()     # Immune memory updates
    DEBUG = auto()      # Damage arithmetic and other detail
    WARNING = auto()    # Ignored or out-of-state calls
    ERROR = auto()      # Error messages


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.AI: "AI",
    LogCategory.MEMORY: "MEM",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


@dataclass
class LogMessage:
    """A single log message with metadata."""
    text: str
    category: LogCategory
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the message for display."""
        parts = []

        if include_timestamp:
            time_str = self.timestamp.strftime("%H:%M:%S")
            parts.append(f"[{time_str}]")

        if include_category:
            tag = CATEGORY_TAGS.get(self.category, "???")
            parts.append(f"[{tag}]")

        parts.append(self.text)
        return " ".join(parts)


class LogLevel(Enum):
    """Severity thresholds, lowest first."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


# Categories not listed here are INFO
CATEGORY_LEVELS = {
    LogCategory.DEBUG: LogLevel.DEBUG,
    LogCategory.AI: LogLevel.DEBUG,
    LogCategory.WARNING: LogLevel.WARNING,
    LogCategory.ERROR: LogLevel.ERROR,
}


class LogManager:
    """Bounded diagnostic log shared by the engine, stepper and immune memory.

    Every message is buffered; category switches and the level threshold
    only affect what get_messages returns.
    """

    def __init__(
        self,
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO,
        log_dir: str = "logs"
    ):
        """
        Args:
            max_messages: Buffer size; the oldest messages drop out first
            default_level: Threshold for unfiltered reads
            log_dir: Directory used by save_log_to_file
        """
        self.messages: deque[LogMessage] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)
        self.log_dir = log_dir

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM) -> None:
        self.messages.append(LogMessage(text=text, category=category))

    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def battle(self, text: str) -> None:
        self.log(text, LogCategory.BATTLE)

    def ai(self, text: str) -> None:
        self.log(text, LogCategory.AI)

    def memory(self, text: str) -> None:
        self.log(text, LogCategory.MEMORY)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR)

    def _passes_level(self, message: LogMessage) -> bool:
        level = CATEGORY_LEVELS.get(message.category, LogLevel.INFO)
        return level.value >= self.log_level.value

    def get_messages(self, count: Optional[int] = None,
                     categories: Optional[set[LogCategory]] = None) -> list[LogMessage]:
        """Read buffered messages, oldest first.

        With explicit categories the level threshold is skipped, so debug
        categories can be inspected without switching debug mode on.
        Disabled categories are never returned.

        Args:
            count: Keep only the most recent messages (None for all)
            categories: Categories to include (None for all visible)
        """
        if categories:
            selected = [m for m in self.messages
                        if m.category in categories and m.category in self.enabled_categories]
        else:
            selected = [m for m in self.messages
                        if m.category in self.enabled_categories and self._passes_level(m)]

        if count is not None:
            return selected[-count:] if count > 0 else []
        return selected

    def clear(self) -> None:
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        return self.log_level is LogLevel.DEBUG and LogCategory.DEBUG in self.enabled_categories

    def toggle_debug(self) -> None:
        """Switch between the INFO view and the full DEBUG view."""
        debug_on = not self.is_debug_enabled()
        if debug_on:
            self.enable_category(LogCategory.DEBUG)
        else:
            self.disable_category(LogCategory.DEBUG)
        self.set_log_level(LogLevel.DEBUG if debug_on else LogLevel.INFO)

    def save_log_to_file(self) -> bool:
        """Save all messages to a timestamped log file.

        Returns:
            True if save was successful, False otherwise
        """
        try:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filepath = os.path.join(self.log_dir, f"combat_{timestamp}.log")
            os.makedirs(self.log_dir, exist_ok=True)

            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Immunis - Combat Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                else:
                    # Save every buffered message, ignoring current filters
                    for msg in self.messages:
                        timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                        f.write(f"[{timestamp_str}] [{msg.category.name}] {msg.text}\n")

            self.system(f"Combat log saved to {filepath}")
            return True

        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return False
