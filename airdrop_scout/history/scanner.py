"""
Past-airdrop scan for one wallet.

Recent signatures are fetched in sequential batches (one JSON-RPC batch per
chunk), each transaction is run through extract_inbound_transfers, and the
surviving events are deduplicated and enriched with symbols and USD values.
A failed signature listing yields no events and a failed batch is skipped,
both logged; the scan always returns what it found.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, Protocol, Sequence

from airdrop_scout.chain.models import SignatureInfo
from airdrop_scout.enrichment.prices import PriceResolver
from airdrop_scout.enrichment.token_metadata import UNKNOWN_SYMBOL, TokenMetadataResolver
from airdrop_scout.history.models import PastAirdrop, TransferEvent
from airdrop_scout.history.transfers import NATIVE_SOL_MINT, extract_inbound_transfers
from airdrop_scout.scout_logging import get_logger, short_wallet

logger = get_logger(__name__)

NATIVE_SOL_SYMBOL = "SOL"
UNKNOWN_DATE = "Unknown"


class ChainDataSource(Protocol):
    async def get_signatures_for_address(self, address: str, limit: int = 100) -> list[SignatureInfo]:
        ...

    async def get_parsed_transactions(self, signatures: Sequence[str]) -> list[dict[str, Any] | None]:
        ...


def format_event_date(timestamp: int) -> str:
    """'Jan 1, 2025' (UTC) for a unix timestamp; 'Unknown' for 0."""
    if not timestamp:
        return UNKNOWN_DATE
    dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return f"{dt:%b} {dt.day}, {dt.year}"


def short_mint(mint: str) -> str:
    return f"{mint[:6]}...{mint[-4:]}"


def dedupe_transfer_events(events: Iterable[TransferEvent]) -> list[TransferEvent]:
    """Newest first; only the first event per (signature, mint, native) survives."""
    seen: set[tuple[str, str, bool]] = set()
    out: list[TransferEvent] = []
    for event in sorted(events, key=lambda e: e.timestamp, reverse=True):
        key = (event.signature, event.mint, event.native)
        if key in seen:
            continue
        seen.add(key)
        out.append(event)
    return out


def _is_sol(event: TransferEvent) -> bool:
    # wrapped SOL is priced and labelled like lamports
    return event.native or event.mint == NATIVE_SOL_MINT


def to_past_airdrop(event: TransferEvent, symbol: str, price: float | None) -> PastAirdrop:
    usd_value = round(price * event.ui_amount, 2) if price is not None else None
    return PastAirdrop(
        signature=event.signature,
        date=format_event_date(event.timestamp),
        timestamp=event.timestamp,
        mint=event.mint,
        mint_short=short_mint(event.mint),
        symbol=symbol,
        amount=event.amount,
        decimals=event.decimals,
        ui_amount=event.ui_amount,
        sender_address=event.sender_address,
        is_likely_airdrop=event.is_likely_airdrop,
        reason=event.reason,
        confidence=event.confidence,
        usd_value=usd_value,
        native=event.native,
    )


async def collect_transfer_events(
    wallet: str,
    source: ChainDataSource,
    max_signatures: int = 100,
    batch_size: int = 20,
) -> list[TransferEvent]:
    """Raw inbound events across the wallet's most recent signatures."""
    try:
        signatures = await source.get_signatures_for_address(wallet, limit=max_signatures)
    except Exception as e:
        logger.warning("history_signatures_failed", wallet=short_wallet(wallet), error=str(e))
        return []
    signatures = signatures[:max_signatures]
    batch_size = max(1, batch_size)

    events: list[TransferEvent] = []
    for start in range(0, len(signatures), batch_size):
        batch = signatures[start:start + batch_size]
        try:
            txs = await source.get_parsed_transactions([s.signature for s in batch])
        except Exception as e:
            logger.warning(
                "history_batch_failed",
                wallet=short_wallet(wallet),
                offset=start,
                size=len(batch),
                error=str(e),
            )
            continue
        for sig, tx in zip(batch, txs):
            if sig.err is not None:
                continue
            events.extend(extract_inbound_transfers(tx, wallet, sig.signature, sig.block_time))
    return events


async def scan_past_airdrops(
    wallet: str,
    source: ChainDataSource,
    metadata: TokenMetadataResolver,
    prices: PriceResolver,
    max_signatures: int = 100,
    batch_size: int = 20,
) -> list[PastAirdrop]:
    """Inbound transfers of wallet, newest first, enriched with symbol and USD value."""
    events = dedupe_transfer_events(
        await collect_transfer_events(wallet, source, max_signatures, batch_size)
    )
    if not events:
        logger.info("history_scan_done", wallet=short_wallet(wallet), events=0, likely=0)
        return []

    token_mints = list(dict.fromkeys(e.mint for e in events if not _is_sol(e)))
    symbols = await metadata.resolve_many(token_mints)
    quote = await prices.fetch_token_prices(token_mints)

    rows: list[PastAirdrop] = []
    for event in events:
        if _is_sol(event):
            symbol = NATIVE_SOL_SYMBOL
            price = quote.sol_price_usd
        else:
            meta = symbols.get(event.mint)
            symbol = meta.symbol if meta else UNKNOWN_SYMBOL
            price = quote.price_for(event.mint)
        rows.append(to_past_airdrop(event, symbol, price))

    logger.info(
        "history_scan_done",
        wallet=short_wallet(wallet),
        events=len(rows),
        likely=sum(1 for r in rows if r.is_likely_airdrop),
    )
    return rows
