"""
Structured logging for Airdrop Scout.

Use get_logger() in all modules for aggregation-friendly JSON output.
"""

from airdrop_scout.scout_logging.logger import bind_wallet, get_logger, short_wallet

__all__ = ["bind_wallet", "get_logger", "short_wallet"]
