"""
structlog setup for Airdrop Scout.

Every record is one line carrying timestamp, level, logger and event_type,
plus whatever keyword context the call site adds. Event names are
snake_case verbs of what happened (claim_api_unreachable, history_batch_failed);
wallets go through short_wallet() so full addresses never reach the log.

    LOG_LEVEL   DEBUG | INFO | WARNING | ERROR   (default INFO)
    LOG_FORMAT  json | console                  (default json)

Imports nothing from airdrop_scout, so any module may import it first.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

import structlog

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "json"
WALLET_PREFIX_LEN = 16


def _env_level() -> int:
    name = os.getenv("LOG_LEVEL", DEFAULT_LEVEL).strip().upper()
    return getattr(logging, name, logging.INFO)


def _env_format() -> str:
    return os.getenv("LOG_FORMAT", DEFAULT_FORMAT).strip().lower()


def stamp_utc(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def event_to_event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type; message mirrors it unless given."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "event_type" in event_dict:
        event_dict.setdefault("message", str(event_dict["event_type"]))
    return event_dict


def build_processors(fmt: str) -> list[Any]:
    """Processor chain ending in a JSON renderer, or a console renderer for fmt='console'."""
    chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        stamp_utc,
        event_to_event_type,
    ]
    if fmt == "json":
        chain.append(structlog.processors.JSONRenderer())
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return chain


def configure_structlog(
    level: int | None = None,
    fmt: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """(Re)configure structlog; unset arguments fall back to LOG_LEVEL, LOG_FORMAT and stdout."""
    structlog.configure(
        processors=build_processors(fmt or _env_format()),
        wrapper_class=structlog.make_filtering_bound_logger(level if level is not None else _env_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Module logger with its name bound under "logger":

        logger = get_logger(__name__)
        logger.info("history_scan_done", wallet=short_wallet(addr), events=12)
    """
    return structlog.get_logger(name).bind(logger=name)


def short_wallet(wallet: str) -> str:
    if len(wallet) <= WALLET_PREFIX_LEN:
        return wallet
    return wallet[:WALLET_PREFIX_LEN] + "..."


def bind_wallet(wallet: str) -> structlog.BoundLogger:
    """Facade logger with the shortened wallet bound to every call."""
    return get_logger("airdrop_scout").bind(wallet=short_wallet(wallet))
