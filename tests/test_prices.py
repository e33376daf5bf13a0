"""
Tests for CoinGecko price lookups (prices.PriceResolver).
"""

from __future__ import annotations

import asyncio

import httpx

from conftest import MINT_A, MINT_B, mock_client

from airdrop_scout.core.cache import TtlCache
from airdrop_scout.enrichment.prices import PriceResolver


def _handler(calls: list[httpx.Request]):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if request.url.path.endswith("/simple/price"):
            return httpx.Response(200, json={"solana": {"usd": 150.0}})
        # CoinGecko lower-cases contract addresses in the response
        return httpx.Response(200, json={MINT_A.lower(): {"usd": 0.8}})

    return handler


def test_fetch_token_prices_and_cache():
    calls: list[httpx.Request] = []

    async def run():
        async with mock_client(_handler(calls)) as client:
            resolver = PriceResolver(client, cache=TtlCache(300), api_key="demo-key")
            first = await resolver.fetch_token_prices([MINT_A, MINT_B])
            second = await resolver.fetch_token_prices([MINT_A])
            return first, second

    first, second = asyncio.run(run())
    assert first.price_for(MINT_A) == 0.8
    assert first.price_for(MINT_B) is None
    assert first.sol_price_usd == 150.0
    assert second.price_for(MINT_A) == 0.8
    # second call: MINT_A and SOL both cached
    assert len(calls) == 2
    assert all(r.headers.get("x-cg-demo-api-key") == "demo-key" for r in calls)
    token_call = next(r for r in calls if "token_price" in r.url.path)
    assert token_call.url.params["contract_addresses"] == f"{MINT_A},{MINT_B}"


def test_price_failure_leaves_prices_missing():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async def run():
        async with mock_client(handler) as client:
            return await PriceResolver(client, cache=TtlCache(300)).fetch_token_prices([MINT_A])

    quote = asyncio.run(run())
    assert quote.sol_price_usd is None
    assert quote.mint_to_price == {}


def test_no_api_key_header_without_key():
    calls: list[httpx.Request] = []

    async def run():
        async with mock_client(_handler(calls)) as client:
            return await PriceResolver(client, cache=TtlCache(300)).fetch_sol_price()

    assert asyncio.run(run()) == 150.0
    assert "x-cg-demo-api-key" not in calls[0].headers
