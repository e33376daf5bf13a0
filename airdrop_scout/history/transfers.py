"""
Inbound transfer extraction for one jsonParsed Solana transaction.

Purely structural plus the additive airdrop heuristic: token balance deltas
for accounts owned by the wallet, and the wallet's own lamport delta. Failed
transactions yield nothing. Weights live in airdrop_scout.scoring.
"""

from __future__ import annotations

from typing import Any

from airdrop_scout import scoring
from airdrop_scout.eligibility.models import LAMPORTS_PER_SOL
from airdrop_scout.history.models import TransferEvent

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"
TOKEN_PROGRAM_IDS = frozenset({TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID})
NATIVE_SOL_MINT = "So11111111111111111111111111111111111111112"
NATIVE_SOL_DECIMALS = 9


def _message(tx: dict[str, Any]) -> dict[str, Any]:
    msg = (tx.get("transaction") or {}).get("message") or {}
    return msg if isinstance(msg, dict) else {}


def _instructions(tx: dict[str, Any]) -> list[Any]:
    return _message(tx).get("instructions") or []


def _account_keys(tx: dict[str, Any]) -> list[str]:
    """accountKeys as base58 strings (jsonParsed gives {pubkey, signer, ...} dicts)."""
    out: list[str] = []
    for k in _message(tx).get("accountKeys") or []:
        if isinstance(k, str):
            out.append(k)
        elif isinstance(k, dict):
            out.append(str(k.get("pubkey", "")))
    return out


def _ui_amount(balance: dict[str, Any] | None) -> float:
    token_amount = (balance or {}).get("uiTokenAmount") or {}
    ui = token_amount.get("uiAmount")
    if ui is None:
        ui = token_amount.get("uiAmountString")
    try:
        return float(ui) if ui is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def senders_by_mint(tx: dict[str, Any]) -> dict[str, str | None]:
    """authority (or source) of each parsed SPL token instruction that names a mint."""
    senders: dict[str, str | None] = {}
    for ix in _instructions(tx):
        if not isinstance(ix, dict) or ix.get("programId") not in TOKEN_PROGRAM_IDS:
            continue
        parsed = ix.get("parsed")
        if not isinstance(parsed, dict):
            continue
        info = parsed.get("info") or {}
        mint = info.get("mint") if isinstance(info, dict) else None
        if not mint:
            continue
        senders[mint] = info.get("authority") or info.get("source") or None
    return senders


def score_token_transfer(
    received: float,
    sender: str | None,
    wallet: str,
    instruction_count: int,
) -> tuple[float, tuple[str, ...]]:
    """Additive airdrop confidence for one inbound token delta, capped at 1.0."""
    confidence = scoring.TRANSFER_BASE_CONFIDENCE
    reasons = ["Inbound token balance increase detected"]
    if not sender:
        confidence += scoring.UNKNOWN_SENDER_BONUS
        reasons.append("Sender unavailable in parsed instructions")
    elif sender != wallet:
        confidence += scoring.EXTERNAL_SENDER_BONUS
        reasons.append("Sender differs from recipient wallet")
    if received > scoring.LARGE_AMOUNT_THRESHOLD:
        confidence += scoring.LARGE_AMOUNT_BONUS
        reasons.append("Large token distribution size")
    if instruction_count > scoring.MULTI_INSTRUCTION_MIN_COUNT:
        confidence += scoring.MULTI_INSTRUCTION_BONUS
        reasons.append("Multi-instruction distribution transaction")
    return round(min(scoring.MAX_CONFIDENCE, confidence), 4), tuple(reasons)


def score_native_transfer(received_sol: float) -> tuple[float, tuple[str, ...]] | None:
    """Confidence for an inbound SOL delta; None below the fee-refund noise floor."""
    if received_sol < scoring.NATIVE_MIN_RECEIVED:
        return None
    if received_sol >= scoring.NATIVE_REWARD_RECEIVED:
        return scoring.NATIVE_REWARD_CONFIDENCE, ("SOL distribution / reward",)
    if received_sol >= scoring.NATIVE_LIKELY_RECEIVED:
        return scoring.NATIVE_LIKELY_CONFIDENCE, ("SOL received",)
    return scoring.NATIVE_MINOR_CONFIDENCE, ("SOL received",)


def _token_events(tx: dict[str, Any], wallet: str, signature: str, timestamp: int) -> list[TransferEvent]:
    meta = tx.get("meta") or {}
    pre_by_key = {
        (b.get("accountIndex"), b.get("mint")): b
        for b in meta.get("preTokenBalances") or []
        if isinstance(b, dict)
    }
    senders = senders_by_mint(tx)
    instruction_count = len(_instructions(tx))

    events: list[TransferEvent] = []
    for post in meta.get("postTokenBalances") or []:
        if not isinstance(post, dict) or post.get("owner") != wallet:
            continue
        mint = post.get("mint")
        if not mint:
            continue
        pre_ui = _ui_amount(pre_by_key.get((post.get("accountIndex"), mint)))
        post_ui = _ui_amount(post)
        if post_ui <= pre_ui:
            continue
        received = post_ui - pre_ui
        sender = senders.get(mint)
        confidence, reasons = score_token_transfer(received, sender, wallet, instruction_count)
        events.append(
            TransferEvent(
                signature=signature,
                timestamp=timestamp,
                mint=mint,
                ui_amount=received,
                decimals=int(((post.get("uiTokenAmount") or {}).get("decimals")) or 0),
                sender_address=sender,
                confidence=confidence,
                reasons=reasons,
            )
        )
    return events


def _native_event(tx: dict[str, Any], wallet: str, signature: str, timestamp: int) -> TransferEvent | None:
    meta = tx.get("meta") or {}
    pre = meta.get("preBalances") or []
    post = meta.get("postBalances") or []
    keys = _account_keys(tx)
    if wallet not in keys:
        return None
    idx = keys.index(wallet)
    if idx >= len(pre) or idx >= len(post):
        return None
    received = ((post[idx] or 0) - (pre[idx] or 0)) / LAMPORTS_PER_SOL
    scored = score_native_transfer(received)
    if scored is None:
        return None
    confidence, reasons = scored
    return TransferEvent(
        signature=signature,
        timestamp=timestamp,
        mint=NATIVE_SOL_MINT,
        ui_amount=received,
        decimals=NATIVE_SOL_DECIMALS,
        sender_address=None,
        confidence=confidence,
        reasons=reasons,
        native=True,
    )


def extract_inbound_transfers(
    tx: dict[str, Any] | None,
    wallet: str,
    signature: str,
    block_time: int | None = None,
) -> list[TransferEvent]:
    """
    All inbound movements into wallet within one transaction.

    block_time (from the signature listing) wins over the transaction's own
    blockTime; 0 when neither is known.
    """
    if not tx:
        return []
    meta = tx.get("meta") or {}
    if meta.get("err") is not None:
        return []
    timestamp = int(block_time or tx.get("blockTime") or 0)
    events = _token_events(tx, wallet, signature, timestamp)
    native = _native_event(tx, wallet, signature, timestamp)
    if native is not None:
        events.append(native)
    return events
