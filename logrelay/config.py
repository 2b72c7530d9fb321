"""Configuration loaded once at startup from the environment and a .env file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .delivery import DEFAULT_API_BASE
from .utils import parse_duration

DEFAULT_MERGE_INTERVAL = 1.0
DEFAULT_PORT = 10000


class ConfigError(Exception):
    """Raised when required settings are missing."""


@dataclass
class RelayConfig:
    """Settings read from the process environment."""

    bot_token: str
    chat_id: str
    merge_interval: float = DEFAULT_MERGE_INTERVAL
    port: int = DEFAULT_PORT
    api_base: str = DEFAULT_API_BASE


def parse_merge_interval(raw: Optional[str]) -> float:
    """Turn a MERGE_INTERVAL value into seconds, defaulting to one second.

    Negative durations are clamped to zero, which closes every window at once.
    """
    if not raw:
        return DEFAULT_MERGE_INTERVAL
    try:
        secs = parse_duration(raw)
    except ValueError as e:
        logging.warning("Invalid MERGE_INTERVAL, defaulting to 1s: %s", e)
        return DEFAULT_MERGE_INTERVAL
    if secs < 0:
        logging.warning("Negative MERGE_INTERVAL %r, using 0s", raw)
        return 0.0
    return secs


def parse_port(raw: Optional[str]) -> int:
    if not raw:
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        logging.warning("Invalid PORT %r, defaulting to %d", raw, DEFAULT_PORT)
        return DEFAULT_PORT
    if not 0 < port < 65536:
        logging.warning("PORT %d out of range, defaulting to %d", port, DEFAULT_PORT)
        return DEFAULT_PORT
    return port


def load_config(env_file: Optional[Path] = None) -> RelayConfig:
    """Load relay settings.

    Values already present in the environment take precedence over the
    ``.env`` file.

    Args:
        env_file: Explicit .env path. If None, search upwards from the
            working directory.

    Raises:
        ConfigError: If the bot token or chat id is missing.
    """
    if not load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True)):
        logging.info("No .env file found, using OS environment variables")

    bot_token = os.getenv("TELEGRAM_BOT_TOKEN", "")
    chat_id = os.getenv("TELEGRAM_CHAT_ID", "")
    if not bot_token or not chat_id:
        raise ConfigError("TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID must be set")

    return RelayConfig(
        bot_token=bot_token,
        chat_id=chat_id,
        merge_interval=parse_merge_interval(os.getenv("MERGE_INTERVAL")),
        port=parse_port(os.getenv("PORT")),
        api_base=os.getenv("TELEGRAM_API_BASE") or DEFAULT_API_BASE,
    )
