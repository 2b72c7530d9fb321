"""Pipeline wiring the inbox, the aggregator thread and the Telegram sink."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from .aggregation import WindowAggregator, WindowAggregatorConfig
from .delivery import DeliveryError, TelegramConfig, TelegramSink
from .inbox import DEFAULT_CAPACITY, Inbox
from .message import Message


class SubmitResult(enum.Enum):
    ACCEPTED = "accepted"
    BUSY = "busy"
    EMPTY_BODY = "empty_body"


@dataclass
class PipelineConfig:
    telegram: TelegramConfig
    aggregator: WindowAggregatorConfig = field(default_factory=WindowAggregatorConfig)
    inbox_capacity: int = DEFAULT_CAPACITY


class Pipeline:
    """End-to-end relay: submit ➜ inbox ➜ merge window ➜ Telegram.

    Threading model:
    - Request threads: call submit(), never block
    - Aggregator: single background worker owning the batch and its timer
    """

    def __init__(self, cfg: PipelineConfig) -> None:
        self.cfg = cfg
        self.inbox = Inbox(cfg.inbox_capacity)
        self.sink = TelegramSink(cfg.telegram)
        self.aggregator = WindowAggregator(cfg.aggregator, self.inbox, self.sink)

    def start(self) -> None:
        logging.info(
            "Starting relay (merge interval %.3fs, inbox capacity %d)…",
            self.cfg.aggregator.merge_interval,
            self.inbox.capacity,
        )
        self.aggregator.start()

    def stop(self) -> None:
        logging.info("Stopping relay…")
        self.aggregator.stop()

    def submit(self, text: str, sender: str = "", level: str = "") -> SubmitResult:
        """Queue a message for the next merge window."""
        if not text:
            return SubmitResult.EMPTY_BODY
        if not self.inbox.offer(Message(text=text, sender=sender, level=level)):
            logging.warning("Inbox full, rejecting message from %r", sender or "-")
            return SubmitResult.BUSY
        return SubmitResult.ACCEPTED

    def report_error(self, description: str) -> None:
        """Best-effort notice to the chat, bypassing the merge window."""
        try:
            self.sink.deliver(f"Error: {description}")
        except DeliveryError as e:
            logging.error("Error sending error notification to Telegram: %s", e)
