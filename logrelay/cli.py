"""Command-line interface for the log relay."""

from __future__ import annotations

import logging
import signal
import sys
from pathlib import Path
from typing import Optional

import typer

from .aggregation import WindowAggregatorConfig
from .config import ConfigError, load_config, parse_merge_interval
from .delivery import TelegramConfig
from .inbox import DEFAULT_CAPACITY
from .pipeline import Pipeline, PipelineConfig
from .server import create_app

__version__ = "0.1.0"

app = typer.Typer(add_completion=True)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"logrelay {__version__}")
        raise typer.Exit()


@app.command()
def run(
    env_file: Optional[Path] = typer.Option(
        None, help="Path to a .env file (default: search for .env)"
    ),
    host: str = typer.Option("0.0.0.0", help="Interface to listen on"),
    port: Optional[int] = typer.Option(
        None, min=1, max=65535, help="Listen port (overrides PORT, default 10000)"
    ),
    merge_interval: Optional[str] = typer.Option(
        None, help="Merge window such as '1s' or '500ms' (overrides MERGE_INTERVAL)"
    ),
    capacity: int = typer.Option(
        DEFAULT_CAPACITY, min=1, help="Messages buffered before requests get 503"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True
    ),
) -> None:
    """Serve POST /notification until interrupted (Ctrl+C).

    Messages arriving within one merge interval of the first message of a
    window are combined into a single Markdown digest and sent to the chat
    given by TELEGRAM_CHAT_ID using the bot token TELEGRAM_BOT_TOKEN.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(filename)s:%(lineno)d | %(message)s",
    )

    try:
        cfg = load_config(env_file)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if merge_interval is not None:
        cfg.merge_interval = parse_merge_interval(merge_interval)
    if port is not None:
        cfg.port = port

    pipeline_cfg = PipelineConfig(
        telegram=TelegramConfig(
            bot_token=cfg.bot_token, chat_id=cfg.chat_id, api_base=cfg.api_base
        ),
        aggregator=WindowAggregatorConfig(merge_interval=cfg.merge_interval),
        inbox_capacity=capacity,
    )
    pipe = Pipeline(pipeline_cfg)

    # Graceful shutdown
    def _shutdown(sig, frame):  # type: ignore[no-untyped-def]
        logging.info("Signal %s received, shutting down…", sig)
        pipe.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, _shutdown)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, _shutdown)

    pipe.start()

    logging.info("Starting server on %s:%d", host, cfg.port)
    create_app(pipe).run(host=host, port=cfg.port, threaded=True)


def main() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
