"""
Pytest fixtures and builders for Airdrop Scout tests.

HTTP collaborators are faked with httpx.MockTransport; coroutines are driven
with asyncio.run inside plain test functions.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from airdrop_scout.eligibility.models import AirdropRule, WalletProfile

WALLET = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
OTHER_WALLET = "HN7cABqLq46Es1jh92dQQisAq662SmxELLLsHHe4YWrH"
MINT_A = "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN"
MINT_B = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


def make_rule(**overrides: Any) -> AirdropRule:
    """Valid active campaign rule; keyword overrides use snake_case field names."""
    data: dict[str, Any] = {
        "id": "jupiter",
        "project": "Jupiter",
        "category": "defi",
        "status": "active",
        "official_claim_url": "https://jup.ag/claim",
        "source_url": "https://x.com/JupiterExchange",
        "trusted_domains": ["jup.ag"],
        "risk_level": "low",
    }
    data.update(overrides)
    return AirdropRule.model_validate(data)


def make_profile(**overrides: Any) -> WalletProfile:
    data: dict[str, Any] = {
        "address": WALLET,
        "sol_balance": 2.5,
        "token_symbols": ("JUPY", "EPJF"),
        "token_mints": (MINT_A,),
        "token_accounts_count": 4,
        "nft_approx_count": 1,
        "recent_transaction_count": 25,
        "account_age_days": 400,
        "last_active_days": 3,
    }
    data.update(overrides)
    return WalletProfile(**data)


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose every request is answered by handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def rule_factory():
    return make_rule


@pytest.fixture
def profile_factory():
    return make_profile


@pytest.fixture
def no_rules_env(monkeypatch):
    """Unset AIRDROP_RULES_PATH so rule loading uses the bundled rules."""
    monkeypatch.delenv("AIRDROP_RULES_PATH", raising=False)
