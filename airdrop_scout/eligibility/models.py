"""
Data models for the eligibility engine.

Campaign rules arrive from an external store as JSON, so they are pydantic
models (camelCase store keys and snake_case both accepted). Everything the
engine computes is a plain dataclass with a to_dict() whose keys are stable
and JSON-serializable.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

LAMPORTS_PER_SOL = 1_000_000_000
SECONDS_PER_DAY = 86_400

EligibilityStatus = Literal["eligible", "likely", "not_eligible", "unknown"]
ProviderEligibilityStatus = Literal["eligible", "not_eligible", "unknown"]
SafetyGrade = Literal["safe", "caution", "risky"]
AirdropLifecycleStatus = Literal["upcoming", "active", "snapshot_taken", "ended"]
AirdropCategory = Literal["defi", "nft", "infrastructure", "consumer"]
RiskLevel = Literal["low", "medium", "high"]

VERIFICATION_CLAIM_API = "claim_api"
VERIFICATION_MANUAL = "manual_verified"
VERIFICATION_UNVERIFIED = "unverified"


# -----------------------------------------------------------------------------
# Campaign rules (external input)
# -----------------------------------------------------------------------------

class _StoreModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class AirdropTimeline(_StoreModel):
    announced_at: str | None = None
    snapshot_at: str | None = None
    claim_opens_at: str | None = None
    claim_ends_at: str | None = None


class RuleChecks(_StoreModel):
    """Attribute thresholds for rule-only evaluation. Unset means not checked."""

    min_sol_balance: float | None = None
    min_token_accounts: int | None = None
    min_recent_transactions: int | None = None
    requires_any_tokens: list[str] | None = None
    min_nft_count: int | None = None
    max_last_active_days: int | None = None


class AirdropRule(_StoreModel):
    """One curated campaign. Read-only to the engine."""

    id: str = Field(..., min_length=1)
    project: str
    network: Literal["solana"] = "solana"
    category: AirdropCategory
    status: AirdropLifecycleStatus
    official_claim_url: str
    source_url: str = ""
    trusted_domains: list[str] = Field(default_factory=list)
    timeline: AirdropTimeline | None = None
    risk_level: RiskLevel = "medium"
    # Free-form on purpose: unknown methods dispatch to the unsupported provider.
    verification_method: str = VERIFICATION_UNVERIFIED
    claim_api_endpoint: str | None = None
    distributor_program_id: str | None = None
    checks: RuleChecks = Field(default_factory=RuleChecks)
    verified: bool = False
    estimated_value: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_active: bool = True

    @field_validator("trusted_domains", "tags", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("checks", mode="before")
    @classmethod
    def _none_to_checks(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("verification_method", mode="before")
    @classmethod
    def _default_method(cls, value: Any) -> Any:
        return value or VERIFICATION_UNVERIFIED


# -----------------------------------------------------------------------------
# Wallet snapshot
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TokenBalance:
    mint: str
    symbol: str
    ui_amount: float
    decimals: int


def _token_account_info(account: dict[str, Any]) -> dict[str, Any]:
    """account.data.parsed.info from a jsonParsed getTokenAccountsByOwner item."""
    try:
        info = account.get("account", {}).get("data", {}).get("parsed", {}).get("info", {})
    except AttributeError:
        return {}
    return info if isinstance(info, dict) else {}


@dataclass(frozen=True)
class WalletProfile:
    """On-chain attributes of a wallet at scan time. Rebuilt on every check."""

    address: str
    sol_balance: float
    token_symbols: tuple[str, ...] = ()
    token_mints: tuple[str, ...] = ()
    token_balances: tuple[TokenBalance, ...] = ()
    token_accounts_count: int = 0
    nft_approx_count: int = 0
    recent_transaction_count: int = 0
    account_age_days: int | None = None
    last_active_days: int | None = None

    @classmethod
    def from_chain_data(
        cls,
        address: str,
        lamports: int,
        token_accounts: list[dict[str, Any]],
        signatures: list[dict[str, Any]],
        now: float | None = None,
    ) -> "WalletProfile":
        """
        Build from raw RPC records: getBalance lamports, jsonParsed
        getTokenAccountsByOwner items, getSignaturesForAddress items (newest first).
        """
        now = time.time() if now is None else now
        balances: list[TokenBalance] = []
        for account in token_accounts:
            info = _token_account_info(account)
            mint = info.get("mint")
            if not isinstance(mint, str) or not mint:
                continue
            token_amount = info.get("tokenAmount") or {}
            ui_amount = token_amount.get("uiAmount")
            balances.append(
                TokenBalance(
                    mint=mint,
                    symbol=mint[:4].upper(),
                    ui_amount=float(ui_amount) if ui_amount is not None else 0.0,
                    decimals=int(token_amount.get("decimals") or 0),
                )
            )

        def _days_since(item: dict[str, Any] | None) -> int | None:
            block_time = (item or {}).get("blockTime")
            if not block_time:
                return None
            return int((now - int(block_time)) // SECONDS_PER_DAY)

        latest = signatures[0] if signatures else None
        oldest = signatures[-1] if signatures else None
        return cls(
            address=address,
            sol_balance=lamports / LAMPORTS_PER_SOL,
            token_symbols=tuple(dict.fromkeys(b.symbol for b in balances)),
            token_mints=tuple(dict.fromkeys(b.mint for b in balances)),
            token_balances=tuple(balances),
            token_accounts_count=len(token_accounts),
            nft_approx_count=sum(1 for b in balances if b.ui_amount == 1),
            recent_transaction_count=len(signatures),
            account_age_days=_days_since(oldest),
            last_active_days=_days_since(latest),
        )


# -----------------------------------------------------------------------------
# Engine output
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ClaimableAmount:
    symbol: str
    ui_amount: float
    verified: bool
    mint: str | None = None
    usd_value: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "mint": self.mint,
            "symbol": self.symbol,
            "ui_amount": self.ui_amount,
            "usd_value": self.usd_value,
            "verified": self.verified,
        }


@dataclass(frozen=True)
class ProviderEligibilityResult:
    status: ProviderEligibilityStatus
    confidence: int
    reason: str
    claimable_amounts: tuple[ClaimableAmount, ...] = ()
    proof: dict[str, Any] | None = None


@dataclass(frozen=True)
class ClaimSafety:
    grade: SafetyGrade
    reasons: tuple[str, ...]
    hostname: str

    def to_dict(self) -> dict[str, Any]:
        return {"grade": self.grade, "reasons": list(self.reasons), "hostname": self.hostname}


@dataclass(frozen=True)
class EvaluationProof:
    """Human-readable proof of match: condition labels met and missed."""

    met: tuple[str, ...] = ()
    unmet: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"met": list(self.met), "unmet": list(self.unmet)}


@dataclass(frozen=True)
class AirdropEvaluation:
    """One output row: campaign metadata + eligibility + claim safety."""

    id: str
    project: str
    status: EligibilityStatus
    confidence: int
    reason: str
    network: str
    category: str
    airdrop_status: str
    official_claim_url: str
    source_url: str
    risk_level: str
    verification_method: str
    verified: bool
    claim_action_enabled: bool
    proof: EvaluationProof
    claim_safety: ClaimSafety
    claimable_amounts: tuple[ClaimableAmount, ...] = ()
    verified_usd_total: float | None = None
    timeline: AirdropTimeline | None = None
    estimated_value: str | None = None
    description: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    provider_proof: dict[str, Any] | None = None  # raw evidence from the eligibility provider

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dict with stable keys."""
        return {
            "id": self.id,
            "project": self.project,
            "status": self.status,
            "confidence": self.confidence,
            "reason": self.reason,
            "network": self.network,
            "category": self.category,
            "airdrop_status": self.airdrop_status,
            "official_claim_url": self.official_claim_url,
            "source_url": self.source_url,
            "risk_level": self.risk_level,
            "verification_method": self.verification_method,
            "verified": self.verified,
            "claim_action_enabled": self.claim_action_enabled,
            "claimable_amounts": [c.to_dict() for c in self.claimable_amounts],
            "verified_usd_total": self.verified_usd_total,
            "estimated_value": self.estimated_value,
            "description": self.description,
            "tags": list(self.tags),
            "timeline": self.timeline.model_dump() if self.timeline is not None else None,
            "proof": self.proof.to_dict(),
            "provider_proof": self.provider_proof,
            "claim_safety": self.claim_safety.to_dict(),
        }
