"""
Environment variable loading for Airdrop Scout.

- SOLANA_RPC_URL: RPC endpoint (wins over everything else)
- HELIUS_API_KEY: Helius key, used to build a mainnet RPC URL when no URL is set
- COINGECKO_API_KEY: optional CoinGecko demo key for price lookups
- AIRDROP_RULES_PATH: JSON file with campaign rules (falls back to built-ins)
- HTTP_TIMEOUT_SEC, HISTORY_MAX_SIGNATURES, HISTORY_BATCH_SIZE, JUPITER_TOKEN_LIST_URL
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is airdrop_scout/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"
JUPITER_STRICT_LIST_URL = "https://token.jup.ag/strict"

DEFAULT_HTTP_TIMEOUT_SEC = 15.0
DEFAULT_HISTORY_MAX_SIGNATURES = 100
DEFAULT_HISTORY_BATCH_SIZE = 20


def load_scout_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    load_dotenv(_ENV_PATH, override=False)


def _env_str(name: str) -> str:
    load_scout_env()
    return (os.getenv(name) or "").strip()


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_solana_rpc_url() -> str:
    """
    Resolve Solana RPC URL from env.
    Order: SOLANA_RPC_URL > HELIUS_API_KEY > public mainnet endpoint.
    """
    url = _env_str("SOLANA_RPC_URL")
    if url:
        return url
    key = _env_str("HELIUS_API_KEY")
    if key:
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    return MAINNET_RPC_URL


def get_coingecko_api_key() -> str | None:
    return _env_str("COINGECKO_API_KEY") or None


def get_rules_path() -> Path | None:
    """Return AIRDROP_RULES_PATH as a Path, or None when unset."""
    raw = _env_str("AIRDROP_RULES_PATH")
    return Path(raw) if raw else None


def get_token_list_url() -> str:
    return _env_str("JUPITER_TOKEN_LIST_URL") or JUPITER_STRICT_LIST_URL


def get_http_timeout() -> float:
    raw = _env_str("HTTP_TIMEOUT_SEC")
    if not raw:
        return DEFAULT_HTTP_TIMEOUT_SEC
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_HTTP_TIMEOUT_SEC
    return value if value > 0 else DEFAULT_HTTP_TIMEOUT_SEC


def get_history_max_signatures() -> int:
    return max(1, _env_int("HISTORY_MAX_SIGNATURES", DEFAULT_HISTORY_MAX_SIGNATURES))


def get_history_batch_size() -> int:
    return max(1, _env_int("HISTORY_BATCH_SIZE", DEFAULT_HISTORY_BATCH_SIZE))


def masked_rpc_url(url: str) -> str:
    """Mask an API key embedded in an RPC URL for log output."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url
