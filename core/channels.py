"""
channels.py - Single-Slot Message Channels

Components exchange values through a one-slot, latest-wins channel:
sending never blocks or fails (a pending value is overwritten) and
receiving never blocks (returns None when nothing is waiting).
"""

import copy
import threading
from typing import Generic, Optional, TypeVar

from loguru import logger


T = TypeVar("T")


class SlotChannel(Generic[T]):
    """Thread-safe latest-value-wins channel"""

    def __init__(self, name: str = "channel", copy_values: bool = True):
        """
        Args:
            name: Label used in log messages
            copy_values: Send a copy so sender and receiver never share a value
        """
        self.name = name
        self.copy_values = copy_values
        self._lock = threading.Lock()
        self._pending: Optional[T] = None
        self._has_value = False
        self.sent_count = 0
        self.overwritten_count = 0

    def send(self, value: T) -> bool:
        """
        Publish a value, replacing any undrained one

        Returns:
            True if an undrained value was overwritten
        """
        if self.copy_values:
            value = copy.copy(value)
        with self._lock:
            overwritten = self._has_value
            self._pending = value
            self._has_value = True
            self.sent_count += 1
            if overwritten:
                self.overwritten_count += 1
        if overwritten:
            logger.debug(f"[{self.name}] replaced undrained value")
        return overwritten

    def try_recv(self) -> Optional[T]:
        """Take the pending value, or None"""
        with self._lock:
            if not self._has_value:
                return None
            value = self._pending
            self._pending = None
            self._has_value = False
        return value

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._has_value

    def clear(self) -> None:
        with self._lock:
            self._pending = None
            self._has_value = False

    def __repr__(self) -> str:
        return f"SlotChannel({self.name!r}, pending={self.has_pending})"
