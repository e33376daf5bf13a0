"""
Async Solana JSON-RPC reader over httpx.

Only the calls the engine needs: balance and token accounts, signature
listing, jsonParsed transaction fetch (one JSON-RPC batch per signature
chunk) and raw account data. Every transport or JSON-RPC failure surfaces as
ChainDataError; callers decide how to degrade.
"""

from __future__ import annotations

import base64
from typing import Any, Sequence

import httpx

from airdrop_scout.chain.models import SignatureInfo
from airdrop_scout.core.exceptions import ChainDataError
from airdrop_scout.scout_logging import get_logger, short_wallet

logger = get_logger(__name__)

COMMITMENT = "confirmed"
MAX_SIGNATURES_LIMIT = 1000
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"


class SolanaRpcClient:
    """JSON-RPC client bound to one endpoint; shares the caller's httpx.AsyncClient."""

    def __init__(self, rpc_url: str, http_client: httpx.AsyncClient) -> None:
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        self._rpc_url = rpc_url.strip()
        self._http = http_client
        self._next_rpc_id = 0

    def _next_id(self) -> int:
        self._next_rpc_id += 1
        return self._next_rpc_id

    async def _post(self, method: str, body: Any) -> Any:
        try:
            r = await self._http.post(self._rpc_url, json=body)
            r.raise_for_status()
            return r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ChainDataError(method, str(e)) from e

    async def call(self, method: str, params: list[Any]) -> Any:
        body = {"jsonrpc": "2.0", "id": self._next_id(), "method": method, "params": params}
        data = await self._post(method, body)
        if not isinstance(data, dict):
            raise ChainDataError(method, "malformed response")
        if data.get("error"):
            raise ChainDataError(method, data["error"])
        return data.get("result")

    async def get_signatures_for_address(self, address: str, limit: int = 100) -> list[SignatureInfo]:
        limit = max(1, min(limit, MAX_SIGNATURES_LIMIT))
        result = await self.call(
            "getSignaturesForAddress",
            [address, {"limit": limit, "commitment": COMMITMENT}],
        )
        out: list[SignatureInfo] = []
        for item in result or []:
            if isinstance(item, dict) and item.get("signature"):
                out.append(SignatureInfo.from_rpc_item(item))
        logger.debug("rpc_signatures_fetched", wallet=short_wallet(address), count=len(out))
        return out

    async def get_parsed_transactions(self, signatures: Sequence[str]) -> list[dict[str, Any] | None]:
        """
        Fetch jsonParsed transactions in one JSON-RPC batch.

        Output is aligned with the input; a missing or errored item is None.
        """
        if not signatures:
            return []
        ids: list[int] = []
        body = []
        for sig in signatures:
            rpc_id = self._next_id()
            ids.append(rpc_id)
            body.append({
                "jsonrpc": "2.0",
                "id": rpc_id,
                "method": "getTransaction",
                "params": [
                    sig,
                    {
                        "encoding": "jsonParsed",
                        "commitment": COMMITMENT,
                        "maxSupportedTransactionVersion": 0,
                    },
                ],
            })
        data = await self._post("getTransaction", body)
        if isinstance(data, dict) and data.get("error"):
            raise ChainDataError("getTransaction", data["error"])
        if not isinstance(data, list):
            raise ChainDataError("getTransaction", "batch response is not a list")

        by_id: dict[Any, Any] = {}
        for item in data:
            if not isinstance(item, dict):
                continue
            if item.get("error"):
                logger.debug("rpc_transaction_error", rpc_id=item.get("id"), error=str(item["error"]))
                continue
            by_id[item.get("id")] = item.get("result")
        return [tx if isinstance(tx, dict) else None for tx in (by_id.get(i) for i in ids)]

    async def get_account_info(self, address: str) -> bytes | None:
        """Raw account data, or None when the account does not exist."""
        result = await self.call(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": COMMITMENT}],
        )
        value = (result or {}).get("value") if isinstance(result, dict) else None
        if not value:
            return None
        data = value.get("data")
        if not isinstance(data, list) or not data:
            return None
        try:
            return base64.b64decode(data[0])
        except ValueError as e:
            raise ChainDataError("getAccountInfo", str(e)) from e

    async def get_balance(self, address: str) -> int:
        """Lamports held by address."""
        result = await self.call("getBalance", [address, {"commitment": COMMITMENT}])
        value = result.get("value") if isinstance(result, dict) else result
        return int(value or 0)

    async def get_token_accounts_by_owner(
        self, address: str, program_id: str = TOKEN_PROGRAM_ID
    ) -> list[dict[str, Any]]:
        """jsonParsed SPL token accounts owned by address under one token program."""
        result = await self.call(
            "getTokenAccountsByOwner",
            [address, {"programId": program_id}, {"encoding": "jsonParsed", "commitment": COMMITMENT}],
        )
        value = result.get("value") if isinstance(result, dict) else None
        return [item for item in value or [] if isinstance(item, dict)]
