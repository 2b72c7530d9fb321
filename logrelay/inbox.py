"""Bounded inbox decoupling HTTP producers from the aggregator thread."""

from __future__ import annotations

import queue
from typing import Optional

from .message import Message

DEFAULT_CAPACITY = 100


class Inbox:
    """Thread-safe FIFO of messages with a fixed capacity.

    Producers call ``offer`` which never blocks; the single consumer calls
    ``take`` which blocks until a message is available (or the timeout ends).
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._q: queue.Queue[Message] = queue.Queue(maxsize=capacity)

    def offer(self, msg: Message) -> bool:
        try:
            self._q.put_nowait(msg)
        except queue.Full:
            return False
        return True

    def take(self, timeout: Optional[float] = None) -> Optional[Message]:
        """Remove and return the oldest message.

        Args:
            timeout: Seconds to wait. None waits forever.

        Returns:
            The message, or None if the timeout expired first.
        """
        if timeout is not None and timeout <= 0:
            try:
                return self._q.get_nowait()
            except queue.Empty:
                return None
        try:
            return self._q.get(timeout=timeout)
        except queue.Empty:
            return None

    def qsize(self) -> int:
        return self._q.qsize()
