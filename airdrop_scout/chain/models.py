"""
Data models for Solana RPC output consumed by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SignatureInfo:
    """
    One getSignaturesForAddress entry, reduced to what the scans read.

    The history scanner batches these into getTransaction calls; the profile
    builder only needs block_time.
    """

    signature: str
    err: Any  # None if success; dict from RPC if failed
    block_time: int | None  # Unix timestamp; None if not available

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "SignatureInfo":
        return cls(
            signature=item["signature"],
            err=item.get("err"),
            block_time=item.get("blockTime"),
        )
