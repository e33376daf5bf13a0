"""
Test that scout_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from scout_logging and use the logger."""
    from airdrop_scout.scout_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_short_wallet_truncates_long_addresses():
    from airdrop_scout.scout_logging import short_wallet

    assert short_wallet("9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM") == "9WzDXwBbmkg8ZTbN..."
    assert short_wallet("short") == "short"


def test_bind_wallet_logs():
    from airdrop_scout.scout_logging import bind_wallet

    log = bind_wallet("9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM")
    log.info("bound_message")


def test_event_becomes_event_type_with_message():
    from airdrop_scout.scout_logging.logger import event_to_event_type

    out = event_to_event_type(None, "info", {"event": "rpc_call_failed", "method": "getBalance"})
    assert out == {"event_type": "rpc_call_failed", "message": "rpc_call_failed", "method": "getBalance"}
    kept = event_to_event_type(None, "info", {"event": "x", "message": "custom"})
    assert kept["message"] == "custom"


def test_build_processors_picks_renderer():
    import structlog

    from airdrop_scout.scout_logging.logger import build_processors

    assert isinstance(build_processors("json")[-1], structlog.processors.JSONRenderer)
    assert isinstance(build_processors("console")[-1], structlog.dev.ConsoleRenderer)


def test_configured_stream_receives_json_lines():
    import io
    import json
    import logging

    from airdrop_scout.scout_logging.logger import configure_structlog, get_logger

    buf = io.StringIO()
    try:
        configure_structlog(level=logging.INFO, fmt="json", stream=buf)
        log = get_logger("scout_test_stream")
        log.debug("dropped_below_level")
        log.info("history_scan_done", events=3)
    finally:
        configure_structlog()

    (line,) = buf.getvalue().splitlines()
    record = json.loads(line)
    assert record["event_type"] == "history_scan_done"
    assert record["logger"] == "scout_test_stream"
    assert record["level"] == "info"
    assert record["events"] == 3
    assert "timestamp" in record
