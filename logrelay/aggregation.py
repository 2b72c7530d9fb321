"""Aggregation logic merging messages that arrive within one time window."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

from .delivery import DeliveryError, TelegramSink
from .inbox import Inbox
from .message import Message, format_digest

ERROR_NOTICE_PREFIX = "Error occurred while processing log message: "


@dataclass
class WindowAggregatorConfig:
    """Configuration for merge windows."""

    merge_interval: float = 1.0
    # how often an idle worker wakes up to check for shutdown
    poll_secs: float = 0.5


class WindowAggregator:
    """Drain the inbox in fixed windows and deliver one digest per window.

    Process flow:
    1. Idle: block until the first message of a window arrives
    2. Start a one-shot deadline of merge_interval from that arrival
    3. Collect every message arriving before the deadline (not reset by arrivals)
    4. Format the batch into a digest and hand it to the sink
    5. On delivery failure, send a single error notice and move on
    """

    def __init__(
        self, cfg: WindowAggregatorConfig, inbox: Inbox, sink: TelegramSink
    ) -> None:
        self.cfg = cfg
        self.inbox = inbox
        self.sink = sink
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return  # Already started
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="Aggregator", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Ask the worker to exit and wait for it.

        A window that is already collecting is closed and delivered first.
        """
        self._stop.set()
        if self._thread is not None:
            if timeout is None:
                timeout = self.cfg.merge_interval + self.cfg.poll_secs + 1.0
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logging.warning("Aggregator still busy after %.1fs, not detaching", timeout)
            else:
                self._thread = None

    def run(self) -> None:
        while not self._stop.is_set():
            first = self.inbox.take(timeout=self.cfg.poll_secs)
            if first is None:
                continue
            try:
                batch = self.collect_window(first)
                self.flush(batch)
            except Exception:
                logging.exception("Unexpected error while processing a merge window")

    def collect_window(self, first: Message) -> list[Message]:
        """Collect messages until merge_interval has passed since ``first``."""
        batch = [first]
        deadline = time.monotonic() + self.cfg.merge_interval
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            msg = self.inbox.take(timeout=remaining)
            if msg is None:
                break
            batch.append(msg)
        return batch

    def flush(self, batch: list[Message]) -> bool:
        """Deliver a batch as one digest.

        Returns:
            True if the digest itself was delivered.
        """
        digest = format_digest(batch)
        try:
            self.sink.deliver(digest)
        except DeliveryError as e:
            logging.error("Error sending message to Telegram: %s", e)
            self._notify_failure(e)
            return False
        logging.info("Digest delivered (%d messages)", len(batch))
        return True

    def _notify_failure(self, err: Exception) -> None:
        # Single attempt; a failure here is only logged.
        try:
            self.sink.deliver(f"{ERROR_NOTICE_PREFIX}{err}")
        except DeliveryError as e2:
            logging.error("Error sending error notification to Telegram: %s", e2)
