"""
Token symbol resolution.

Order: per-mint cache → Jupiter strict token list → Metaplex metadata
account on chain → "UNKNOWN". Nothing here raises into the caller; a failed
lookup simply moves on to the next source.
"""

from __future__ import annotations

import asyncio
import re
import struct
from dataclasses import dataclass
from typing import Iterable, Protocol

import httpx
from solders.pubkey import Pubkey

from airdrop_scout.core.cache import TtlCache
from airdrop_scout.scout_logging import get_logger

logger = get_logger(__name__)

METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")
UNKNOWN_SYMBOL = "UNKNOWN"
TOKEN_LIST_KEY = "jupiter-token-list"

# Metaplex metadata account: key (1) + update authority (32) + mint (32), then borsh name, symbol
_METADATA_HEADER_LEN = 1 + 32 + 32
_METADATA_MIN_LEN = 70
_SYMBOL_RE = re.compile(r"^[a-zA-Z0-9$_.-]{1,12}$")


class AccountInfoSource(Protocol):
    async def get_account_info(self, address: str) -> bytes | None:
        ...


@dataclass(frozen=True)
class TokenMetadata:
    mint: str
    symbol: str
    name: str | None = None
    logo_uri: str | None = None


def sanitize_symbol(value: str | None) -> str | None:
    """Strip NULs/whitespace; accept short ASCII tickers only, upper-cased."""
    if not value:
        return None
    clean = value.replace("\0", "").strip()
    if not clean or not _SYMBOL_RE.match(clean):
        return None
    return clean.upper()


def read_borsh_string(data: bytes, offset: int) -> tuple[str | None, int]:
    """Read a u32-length-prefixed UTF-8 string; (None, offset) when truncated."""
    if offset + 4 > len(data):
        return None, offset
    (length,) = struct.unpack_from("<I", data, offset)
    start = offset + 4
    end = start + length
    if end > len(data):
        return None, offset
    raw = data[start:end].decode("utf-8", errors="ignore").replace("\0", "").strip()
    return (raw or None), end


def parse_metaplex_metadata(mint: str, data: bytes) -> TokenMetadata | None:
    if len(data) < _METADATA_MIN_LEN:
        return None
    name, cursor = read_borsh_string(data, _METADATA_HEADER_LEN)
    symbol, _ = read_borsh_string(data, cursor)
    clean = sanitize_symbol(symbol)
    if not clean:
        return None
    return TokenMetadata(mint=mint, symbol=clean, name=name)


def metadata_pda(mint: str) -> Pubkey:
    """Metaplex metadata PDA for a mint. Raises ValueError on a malformed mint."""
    mint_pk = Pubkey.from_string(mint)
    pda, _bump = Pubkey.find_program_address(
        [b"metadata", bytes(METADATA_PROGRAM_ID), bytes(mint_pk)],
        METADATA_PROGRAM_ID,
    )
    return pda


class TokenMetadataResolver:
    """Resolve mint → TokenMetadata with list lookup first and on-chain fallback."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        chain: AccountInfoSource | None,
        *,
        token_list_url: str,
        symbol_cache: TtlCache[str, TokenMetadata],
        list_cache: TtlCache[str, dict[str, TokenMetadata]],
    ) -> None:
        self._http = http_client
        self._chain = chain
        self._token_list_url = token_list_url
        self._symbol_cache = symbol_cache
        self._list_cache = list_cache

    async def load_token_list(self) -> dict[str, TokenMetadata]:
        cached = self._list_cache.get(TOKEN_LIST_KEY)
        if cached is not None:
            return cached

        tokens: dict[str, TokenMetadata] = {}
        try:
            r = await self._http.get(self._token_list_url, headers={"accept": "application/json"})
            if r.is_success:
                payload = r.json()
                for item in payload if isinstance(payload, list) else []:
                    if not isinstance(item, dict):
                        continue
                    mint = item.get("address")
                    symbol = sanitize_symbol(item.get("symbol"))
                    if not mint or not symbol:
                        continue
                    tokens[mint] = TokenMetadata(
                        mint=mint,
                        symbol=symbol,
                        name=item.get("name"),
                        logo_uri=item.get("logoURI"),
                    )
            else:
                logger.warning("token_list_http_error", status_code=r.status_code)
        except Exception as e:
            logger.warning("token_list_fetch_failed", url=self._token_list_url, error=str(e))

        # An empty list is cached too; the endpoint is retried after the list TTL.
        self._list_cache.set(TOKEN_LIST_KEY, tokens)
        logger.debug("token_list_loaded", count=len(tokens))
        return tokens

    async def _from_chain(self, mint: str) -> TokenMetadata | None:
        if self._chain is None:
            return None
        try:
            data = await self._chain.get_account_info(str(metadata_pda(mint)))
        except Exception as e:
            logger.debug("token_metadata_chain_failed", mint=mint, error=str(e))
            return None
        if not data:
            return None
        return parse_metaplex_metadata(mint, data)

    async def resolve(self, mint: str) -> TokenMetadata:
        cached = self._symbol_cache.get(mint)
        if cached is not None:
            return cached

        token_list = await self.load_token_list()
        found = token_list.get(mint) or await self._from_chain(mint)
        if found is None:
            found = TokenMetadata(mint=mint, symbol=UNKNOWN_SYMBOL)
        self._symbol_cache.set(mint, found)
        return found

    async def resolve_many(self, mints: Iterable[str]) -> dict[str, TokenMetadata]:
        unique = list(dict.fromkeys(m for m in mints if m))
        if not unique:
            return {}
        # Warm the list once so concurrent lookups do not each fetch it.
        await self.load_token_list()
        resolved = await asyncio.gather(*(self.resolve(m) for m in unique))
        return {item.mint: item for item in resolved}

