"""
Symbol and USD price enrichment for detected transfers. Both resolvers take
their TtlCache instances from the caller.
"""

from airdrop_scout.enrichment.prices import PriceQuote, PriceResolver
from airdrop_scout.enrichment.token_metadata import TokenMetadata, TokenMetadataResolver

__all__ = ["PriceQuote", "PriceResolver", "TokenMetadata", "TokenMetadataResolver"]
