"""
Data models for historical transfer detection.

TransferEvent is the classifier's raw output for one inbound movement;
PastAirdrop is the enriched, JSON-serializable row handed to callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from airdrop_scout import scoring


@dataclass(frozen=True)
class TransferEvent:
    signature: str
    timestamp: int
    mint: str
    ui_amount: float
    decimals: int
    sender_address: str | None
    confidence: float
    reasons: tuple[str, ...]
    native: bool = False  # lamport movement, not a token account

    @property
    def amount(self) -> int:
        """Raw integer amount in the token's base units."""
        return round(self.ui_amount * 10 ** self.decimals)

    @property
    def reason(self) -> str:
        return " | ".join(self.reasons)

    @property
    def is_likely_airdrop(self) -> bool:
        return self.confidence >= scoring.LIKELY_AIRDROP_THRESHOLD


@dataclass(frozen=True)
class PastAirdrop:
    signature: str
    date: str
    timestamp: int
    mint: str
    mint_short: str
    symbol: str
    amount: int
    decimals: int
    ui_amount: float
    sender_address: str | None
    is_likely_airdrop: bool
    reason: str
    confidence: float
    usd_value: float | None = None
    native: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dict; keys are stable."""
        return {
            "signature": self.signature,
            "date": self.date,
            "timestamp": self.timestamp,
            "mint": self.mint,
            "mint_short": self.mint_short,
            "symbol": self.symbol,
            "amount": self.amount,
            "decimals": self.decimals,
            "ui_amount": self.ui_amount,
            "sender_address": self.sender_address,
            "is_likely_airdrop": self.is_likely_airdrop,
            "reason": self.reason,
            "confidence": self.confidence,
            "usd_value": self.usd_value,
            "native": self.native,
        }
