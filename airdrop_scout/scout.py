"""
AirdropScout: the engine's entry point.

Owns the shared httpx.AsyncClient, the Solana RPC reader and the enrichment
caches for its lifetime, and exposes its read-only operations:

    async with AirdropScout() as scout:
        report = await scout.check_wallet(address)        # eligibility providers
        report = await scout.check_wallet_rules(address)  # rule checks, live profile
        report = await scout.check_profile(profile)       # rule checks, offline
        history = await scout.scan_history(address)       # past airdrops

Nothing here signs or submits transactions; addresses are only read.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

import httpx
from solders.pubkey import Pubkey

from airdrop_scout.chain.rpc import SolanaRpcClient
from airdrop_scout.config.env import masked_rpc_url
from airdrop_scout.config.settings import Settings, get_settings
from airdrop_scout.core.cache import TtlCache
from airdrop_scout.core.exceptions import InvalidWalletAddress
from airdrop_scout.eligibility.evaluator import evaluate_wallet_airdrops, evaluate_with_providers
from airdrop_scout.eligibility.models import AirdropEvaluation, AirdropRule, WalletProfile
from airdrop_scout.eligibility.rules_store import load_airdrop_rules
from airdrop_scout.enrichment.prices import PriceResolver
from airdrop_scout.enrichment.token_metadata import TokenMetadataResolver
from airdrop_scout.history.models import PastAirdrop
from airdrop_scout.history.scanner import scan_past_airdrops
from airdrop_scout.scout_logging import bind_wallet, get_logger

logger = get_logger(__name__)

PROFILE_SIGNATURE_LIMIT = 100
SAFETY_NOTE = "Only use official claim URLs. Never share seed phrases."


def validate_wallet_address(address: str | None) -> str:
    """Return the trimmed address; raise InvalidWalletAddress unless it is a valid pubkey."""
    candidate = (address or "").strip()
    if not candidate:
        raise InvalidWalletAddress(address or "")
    try:
        Pubkey.from_string(candidate)
    except ValueError as e:
        raise InvalidWalletAddress(candidate) from e
    return candidate


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class WalletCheckReport:
    wallet: str
    checked_at: str
    results: tuple[AirdropEvaluation, ...]
    profile: WalletProfile | None = None

    @property
    def eligible(self) -> tuple[AirdropEvaluation, ...]:
        return tuple(r for r in self.results if r.status == "eligible")

    def to_dict(self) -> dict[str, Any]:
        return {
            "wallet": self.wallet,
            "checked_at": self.checked_at,
            "profile": _profile_dict(self.profile) if self.profile else None,
            "results": [r.to_dict() for r in self.results],
            "safety": {
                "read_only": True,
                "private_keys_requested": False,
                "note": SAFETY_NOTE,
            },
        }


@dataclass(frozen=True)
class HistoryReport:
    wallet: str
    checked_at: str
    past_airdrops: tuple[PastAirdrop, ...] = field(default_factory=tuple)

    @property
    def total_received(self) -> int:
        """Count of events classified as likely airdrops."""
        return sum(1 for p in self.past_airdrops if p.is_likely_airdrop)

    def to_dict(self) -> dict[str, Any]:
        return {
            "wallet": self.wallet,
            "checked_at": self.checked_at,
            "past_airdrops": [p.to_dict() for p in self.past_airdrops],
            "total_received": self.total_received,
        }


def _profile_dict(profile: WalletProfile) -> dict[str, Any]:
    return {
        "address": profile.address,
        "sol_balance": profile.sol_balance,
        "token_symbols": list(profile.token_symbols),
        "token_accounts_count": profile.token_accounts_count,
        "nft_approx_count": profile.nft_approx_count,
        "recent_transaction_count": profile.recent_transaction_count,
        "account_age_days": profile.account_age_days,
        "last_active_days": profile.last_active_days,
    }


class AirdropScout:
    """
    Async context manager bundling every collaborator the engine needs.

    Pass http_client to share an existing client (it is then not closed on
    exit); pass rules to bypass the rule store.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        rules: Sequence[AirdropRule] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=self.settings.http_timeout_sec)
        self._rules = list(rules) if rules is not None else None

        self.rpc = SolanaRpcClient(self.settings.solana_rpc_url, self._http)
        self.metadata = TokenMetadataResolver(
            self._http,
            self.rpc,
            token_list_url=self.settings.token_list_url,
            symbol_cache=TtlCache(self.settings.symbol_cache_ttl_sec),
            list_cache=TtlCache(self.settings.token_list_cache_ttl_sec),
        )
        self.prices = PriceResolver(
            self._http,
            cache=TtlCache(self.settings.price_cache_ttl_sec),
            api_key=self.settings.coingecko_api_key,
        )
        logger.debug("scout_initialized", rpc_url=masked_rpc_url(self.settings.solana_rpc_url))

    async def __aenter__(self) -> "AirdropScout":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def rules(self) -> list[AirdropRule]:
        if self._rules is not None:
            return list(self._rules)
        return load_airdrop_rules(self.settings.rules_path)

    async def fetch_profile(self, address: str) -> WalletProfile:
        """
        Snapshot a wallet's on-chain attributes.

        Raises InvalidWalletAddress, or ChainDataError when the RPC is unreachable.
        """
        wallet = validate_wallet_address(address)
        lamports, token_accounts, signatures = await asyncio.gather(
            self.rpc.get_balance(wallet),
            self.rpc.get_token_accounts_by_owner(wallet),
            self.rpc.get_signatures_for_address(wallet, limit=PROFILE_SIGNATURE_LIMIT),
        )
        return WalletProfile.from_chain_data(
            wallet,
            lamports,
            token_accounts,
            [{"signature": s.signature, "blockTime": s.block_time} for s in signatures],
        )

    async def check_wallet(self, address: str) -> WalletCheckReport:
        """Ask every campaign's eligibility provider about the wallet."""
        wallet = validate_wallet_address(address)
        log = bind_wallet(wallet)
        rules = await asyncio.to_thread(self.rules)
        results = await evaluate_with_providers(wallet, rules, self._http)
        log.info("wallet_check_done", mode="provider", campaigns=len(results))
        return WalletCheckReport(wallet=wallet, checked_at=_utc_now_iso(), results=tuple(results))

    async def check_wallet_rules(self, address: str) -> WalletCheckReport:
        """
        Build the wallet profile and load the rules concurrently, then run the
        rule checks. ChainDataError from the profile fetch propagates.
        """
        wallet = validate_wallet_address(address)
        profile, rules = await asyncio.gather(
            self.fetch_profile(wallet),
            asyncio.to_thread(self.rules),
        )
        return self._attribute_report(profile, rules)

    async def check_profile(self, profile: WalletProfile) -> WalletCheckReport:
        """Evaluate campaign rule checks against an already built profile."""
        rules = await asyncio.to_thread(self.rules)
        return self._attribute_report(profile, rules)

    def _attribute_report(self, profile: WalletProfile, rules: Sequence[AirdropRule]) -> WalletCheckReport:
        results = evaluate_wallet_airdrops(profile, rules)
        bind_wallet(profile.address).info("wallet_check_done", mode="attribute", campaigns=len(results))
        return WalletCheckReport(
            wallet=profile.address,
            checked_at=_utc_now_iso(),
            results=tuple(results),
            profile=profile,
        )

    async def scan_history(self, address: str) -> HistoryReport:
        """Past inbound transfers, newest first, with the likely-airdrop count."""
        wallet = validate_wallet_address(address)
        rows = await scan_past_airdrops(
            wallet,
            self.rpc,
            self.metadata,
            self.prices,
            max_signatures=self.settings.history_max_signatures,
            batch_size=self.settings.history_batch_size,
        )
        return HistoryReport(wallet=wallet, checked_at=_utc_now_iso(), past_airdrops=tuple(rows))
