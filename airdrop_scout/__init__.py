"""
Airdrop Scout — eligibility and provenance engine for Solana token airdrops.

Decides, per curated campaign, whether a wallet is eligible and how safe the
claim destination looks; separately scans a wallet's transaction history for
inbound transfers that were probably airdrops.
"""

__version__ = "0.1.0"
