"""
USD price lookups via CoinGecko.

Token prices are keyed by mint (simple/token_price/solana); the SOL price
comes from simple/price. Prices are cached for a few minutes. A failed
request leaves the affected prices missing rather than raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

import httpx

from airdrop_scout.core.cache import TtlCache
from airdrop_scout.scout_logging import get_logger

logger = get_logger(__name__)

COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"
SOL_PRICE_KEY = "solana"


@dataclass(frozen=True)
class PriceQuote:
    sol_price_usd: float | None
    mint_to_price: dict[str, float] = field(default_factory=dict)

    def price_for(self, mint: str) -> float | None:
        return self.mint_to_price.get(mint)


def _usd(entry: Any) -> float | None:
    if not isinstance(entry, dict):
        return None
    usd = entry.get("usd")
    if isinstance(usd, (int, float)) and not isinstance(usd, bool):
        return float(usd)
    return None


class PriceResolver:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        cache: TtlCache[str, float],
        api_key: str | None = None,
        base_url: str = COINGECKO_BASE_URL,
    ) -> None:
        self._http = http_client
        self._cache = cache
        self._base_url = base_url.rstrip("/")
        self._headers = {"accept": "application/json"}
        if api_key:
            self._headers["x-cg-demo-api-key"] = api_key

    async def _get_json(self, path: str, params: dict[str, str]) -> Any:
        """GET a CoinGecko endpoint; None on any failure."""
        try:
            r = await self._http.get(f"{self._base_url}{path}", params=params, headers=self._headers)
            if not r.is_success:
                logger.warning("price_http_error", path=path, status_code=r.status_code)
                return None
            return r.json()
        except Exception as e:
            logger.warning("price_fetch_failed", path=path, error=str(e))
            return None

    async def fetch_sol_price(self) -> float | None:
        cached = self._cache.get(SOL_PRICE_KEY)
        if cached is not None:
            return cached
        payload = await self._get_json("/simple/price", {"ids": "solana", "vs_currencies": "usd"})
        price = _usd((payload or {}).get("solana")) if isinstance(payload, dict) else None
        if price is not None:
            self._cache.set(SOL_PRICE_KEY, price)
        return price

    async def fetch_token_prices(self, mints: Iterable[str]) -> PriceQuote:
        """Prices for every mint CoinGecko knows, plus the SOL price."""
        unique = list(dict.fromkeys(m for m in mints if m))
        mint_to_price: dict[str, float] = {}
        misses: list[str] = []
        for mint in unique:
            cached = self._cache.get(f"mint:{mint}")
            if cached is not None:
                mint_to_price[mint] = cached
            else:
                misses.append(mint)

        if misses:
            payload = await self._get_json(
                "/simple/token_price/solana",
                {"contract_addresses": ",".join(misses), "vs_currencies": "usd"},
            )
            if isinstance(payload, dict):
                # CoinGecko lower-cases contract addresses in its response keys.
                lowered = {str(k).lower(): v for k, v in payload.items()}
                for mint in misses:
                    price = _usd(lowered.get(mint.lower()))
                    if price is not None:
                        mint_to_price[mint] = price
                        self._cache.set(f"mint:{mint}", price)

        sol = await self.fetch_sol_price()
        logger.debug("prices_resolved", requested=len(unique), priced=len(mint_to_price))
        return PriceQuote(sol_price_usd=sol, mint_to_price=mint_to_price)
