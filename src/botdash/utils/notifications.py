"""Transient user notifications (toasts) raised by the data layer."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from typing import Deque, List

from loguru import logger

LEVELS = ("success", "info", "warning", "error")


@dataclass(frozen=True)
class Notification:
    """A message waiting to be shown to the user."""

    level: str
    message: str
    created_at: datetime = field(default_factory=datetime.now)
    sequence: int = 0


class NotificationCenter:
    """
    Bounded queue of notifications drained by the UI.

    Posting also logs the message, so a headless run still records what the
    user would have seen. When the queue is full the oldest entry is dropped.

    Two ways to read: drain() empties the queue for a single consumer, while
    after() reads the shared history from a caller-held sequence cursor, so
    several UI sessions can each see every notification once.

    Args:
        limit: Maximum number of pending notifications

    Example:
        >>> center = NotificationCenter()
        >>> center.error("Failed to fetch feature data")
        >>> [n.message for n in center.drain()]
        ['Failed to fetch feature data']
    """

    def __init__(self, limit: int = 50) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self._pending: Deque[Notification] = deque(maxlen=limit)
        self._history: Deque[Notification] = deque(maxlen=limit)
        self._sequence = 0
        self._lock = Lock()

    def post(self, level: str, message: str) -> Notification:
        if level not in LEVELS:
            raise ValueError(f"Invalid notification level: {level}. Must be one of {LEVELS}")

        with self._lock:
            self._sequence += 1
            notification = Notification(level=level, message=message, sequence=self._sequence)
            self._pending.append(notification)
            self._history.append(notification)

        log_level = "SUCCESS" if level == "success" else level.upper()
        logger.log(log_level, message)
        return notification

    def success(self, message: str) -> Notification:
        return self.post("success", message)

    def info(self, message: str) -> Notification:
        return self.post("info", message)

    def warning(self, message: str) -> Notification:
        return self.post("warning", message)

    def error(self, message: str) -> Notification:
        return self.post("error", message)

    def drain(self) -> List[Notification]:
        """Remove and return all pending notifications, oldest first."""
        with self._lock:
            pending = list(self._pending)
            self._pending.clear()
        return pending

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    def after(self, sequence: int) -> List[Notification]:
        """History entries newer than ``sequence``, oldest first. Nothing is removed."""
        with self._lock:
            return [n for n in self._history if n.sequence > sequence]

    def sequence_before(self, moment: datetime) -> int:
        """
        Cursor for a reader that only wants notifications posted from ``moment`` on.

        Example:
            >>> cursor = center.sequence_before(session_started_at)
            >>> new = center.after(cursor)
        """
        with self._lock:
            older = [n.sequence for n in self._history if n.created_at < moment]
            if older:
                return max(older)
            if self._history:
                return self._history[0].sequence - 1
            return self._sequence

    def __len__(self) -> int:
        return len(self._pending)
