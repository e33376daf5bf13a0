"""
Solana chain-data access: a thin async JSON-RPC reader used by the history
scanner and the on-chain token-metadata fallback.
"""

from airdrop_scout.chain.models import SignatureInfo
from airdrop_scout.chain.rpc import SolanaRpcClient

__all__ = ["SignatureInfo", "SolanaRpcClient"]
