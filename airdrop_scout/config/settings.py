"""
Application settings.

Typed, immutable snapshot of the environment (see config/env.py) handed to
the Scout facade. Tests build Settings directly instead of patching env.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from airdrop_scout.config import env


@dataclass(frozen=True)
class Settings:
    solana_rpc_url: str = env.MAINNET_RPC_URL
    coingecko_api_key: str | None = None
    rules_path: Path | None = None
    token_list_url: str = env.JUPITER_STRICT_LIST_URL
    http_timeout_sec: float = env.DEFAULT_HTTP_TIMEOUT_SEC
    history_max_signatures: int = env.DEFAULT_HISTORY_MAX_SIGNATURES
    history_batch_size: int = env.DEFAULT_HISTORY_BATCH_SIZE
    # Cache lifetimes (seconds)
    symbol_cache_ttl_sec: float = 12 * 60 * 60
    token_list_cache_ttl_sec: float = 30 * 60
    price_cache_ttl_sec: float = 5 * 60


def get_settings() -> Settings:
    """Return settings resolved from the current environment."""
    return Settings(
        solana_rpc_url=env.get_solana_rpc_url(),
        coingecko_api_key=env.get_coingecko_api_key(),
        rules_path=env.get_rules_path(),
        token_list_url=env.get_token_list_url(),
        http_timeout_sec=env.get_http_timeout(),
        history_max_signatures=env.get_history_max_signatures(),
        history_batch_size=env.get_history_batch_size(),
    )
