"""
Eligibility engine: trusted-domain checks, claim-safety grading, eligibility
providers and the rule evaluator.
"""

from airdrop_scout.eligibility.claim_safety import evaluate_claim_safety
from airdrop_scout.eligibility.evaluator import (
    check_rule,
    evaluate_wallet_airdrops,
    evaluate_with_providers,
)
from airdrop_scout.eligibility.models import (
    AirdropEvaluation,
    AirdropRule,
    ClaimSafety,
    ProviderEligibilityResult,
    WalletProfile,
)
from airdrop_scout.eligibility.providers import build_provider
from airdrop_scout.eligibility.rules_store import load_airdrop_rules
from airdrop_scout.eligibility.trusted_domains import is_trusted_claim_domain

__all__ = [
    "AirdropEvaluation",
    "AirdropRule",
    "ClaimSafety",
    "ProviderEligibilityResult",
    "WalletProfile",
    "build_provider",
    "check_rule",
    "evaluate_claim_safety",
    "evaluate_wallet_airdrops",
    "evaluate_with_providers",
    "is_trusted_claim_domain",
    "load_airdrop_rules",
]
