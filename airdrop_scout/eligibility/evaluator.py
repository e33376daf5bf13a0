"""
Rule evaluator: one wallet against every campaign.

Two strategies share the AirdropEvaluation output type:

- attribute mode (evaluate_wallet_airdrops): compares a WalletProfile with
  each rule's configured checks, no network access;
- provider mode (evaluate_with_providers): asks each campaign's eligibility
  provider concurrently; one failing campaign degrades to "unknown" and the
  batch carries on.

Both attach the claim-safety verdict and sort by confidence, highest first.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

import httpx

from airdrop_scout import scoring
from airdrop_scout.eligibility.claim_safety import evaluate_claim_safety
from airdrop_scout.eligibility.models import (
    AirdropEvaluation,
    AirdropRule,
    ClaimableAmount,
    ClaimSafety,
    EligibilityStatus,
    EvaluationProof,
    ProviderEligibilityResult,
    WalletProfile,
)
from airdrop_scout.eligibility.providers import build_provider
from airdrop_scout.eligibility.trusted_domains import is_trusted_claim_domain
from airdrop_scout.scout_logging import get_logger, short_wallet

logger = get_logger(__name__)


@dataclass(frozen=True)
class RuleCheckOutcome:
    status: EligibilityStatus
    confidence: int
    reason: str
    proof: EvaluationProof


def _fmt(value: float) -> str:
    """Render a threshold the way it was configured: 1 not 1.0."""
    number = float(value)
    return str(int(number)) if number.is_integer() else str(value)


def check_rule(rule: AirdropRule, profile: WalletProfile) -> RuleCheckOutcome:
    """Evaluate every configured check of rule.checks against the profile."""
    checks = rule.checks
    met: list[str] = []
    unmet: list[str] = []

    def record(passed: bool, met_label: str, unmet_label: str) -> None:
        (met if passed else unmet).append(met_label if passed else unmet_label)

    if checks.min_sol_balance is not None:
        n = _fmt(checks.min_sol_balance)
        record(profile.sol_balance >= checks.min_sol_balance, f"SOL >= {n}", f"SOL below {n}")

    if checks.min_token_accounts is not None:
        n = _fmt(checks.min_token_accounts)
        record(
            profile.token_accounts_count >= checks.min_token_accounts,
            f"Token accounts >= {n}",
            f"Token accounts below {n}",
        )

    if checks.min_recent_transactions is not None:
        n = _fmt(checks.min_recent_transactions)
        record(
            profile.recent_transaction_count >= checks.min_recent_transactions,
            f"Recent tx >= {n}",
            f"Recent tx below {n}",
        )

    if checks.min_nft_count is not None:
        n = _fmt(checks.min_nft_count)
        record(profile.nft_approx_count >= checks.min_nft_count, f"NFT count >= {n}", f"NFT count below {n}")

    if checks.requires_any_tokens:
        tokens = ", ".join(checks.requires_any_tokens)
        held = set(profile.token_symbols)
        record(
            any(t in held for t in checks.requires_any_tokens),
            f"Has one token in [{tokens}]",
            f"Missing tokens: [{tokens}]",
        )

    if checks.max_last_active_days is not None:
        n = _fmt(checks.max_last_active_days)
        # Unknown last activity counts as a miss.
        record(
            profile.last_active_days is not None and profile.last_active_days <= checks.max_last_active_days,
            f"Active within {n} days",
            f"Not active within {n} days",
        )

    proof = EvaluationProof(met=tuple(met), unmet=tuple(unmet))
    total = len(met) + len(unmet)
    if total == 0:
        return RuleCheckOutcome(status="unknown", confidence=0, reason="No applicable checks", proof=proof)

    ratio = len(met) / total
    confidence = round(ratio * 100)
    reason = f"{len(met)} checks passed, {len(unmet)} missed"
    if ratio >= scoring.ELIGIBLE_RATIO:
        status: EligibilityStatus = "eligible"
    elif ratio >= scoring.LIKELY_RATIO:
        status = "likely"
    else:
        status = "not_eligible"
    return RuleCheckOutcome(status=status, confidence=confidence, reason=reason, proof=proof)


def claim_action_enabled(
    status: EligibilityStatus,
    claim_domain_trusted: bool,
    rule: AirdropRule,
    safety: ClaimSafety,
) -> bool:
    """Claim button only for eligible wallets on trusted, live, non-risky destinations."""
    return (
        status == "eligible"
        and claim_domain_trusted
        and rule.status != "upcoming"
        and safety.grade != "risky"
    )


def _verified_usd_total(amounts: Iterable[ClaimableAmount]) -> float | None:
    total = sum(a.usd_value for a in amounts if a.usd_value is not None)
    return total if total > 0 else None


def _build_evaluation(
    rule: AirdropRule,
    *,
    status: EligibilityStatus,
    confidence: int,
    reason: str,
    proof: EvaluationProof,
    safety: ClaimSafety,
    claim_domain_trusted: bool,
    claimable: tuple[ClaimableAmount, ...] = (),
    provider_proof: dict[str, Any] | None = None,
) -> AirdropEvaluation:
    return AirdropEvaluation(
        id=rule.id,
        project=rule.project,
        status=status,
        confidence=confidence,
        reason=reason,
        network=rule.network,
        category=rule.category,
        airdrop_status=rule.status,
        official_claim_url=rule.official_claim_url,
        source_url=rule.source_url,
        risk_level=rule.risk_level,
        verification_method=rule.verification_method,
        verified=rule.verified,
        claim_action_enabled=claim_action_enabled(status, claim_domain_trusted, rule, safety),
        proof=proof,
        claim_safety=safety,
        claimable_amounts=claimable,
        verified_usd_total=_verified_usd_total(claimable),
        timeline=rule.timeline,
        estimated_value=rule.estimated_value,
        description=rule.description,
        tags=tuple(rule.tags),
        provider_proof=provider_proof,
    )


def sort_evaluations(evaluations: Iterable[AirdropEvaluation]) -> list[AirdropEvaluation]:
    """Confidence descending; ties keep input order (sorted() is stable)."""
    return sorted(evaluations, key=lambda e: e.confidence, reverse=True)


def evaluate_wallet_airdrops(profile: WalletProfile, rules: Sequence[AirdropRule]) -> list[AirdropEvaluation]:
    """Attribute mode: rule checks against a wallet snapshot, no network access."""
    evaluations = []
    for rule in rules:
        outcome = check_rule(rule, profile)
        evaluations.append(
            _build_evaluation(
                rule,
                status=outcome.status,
                confidence=outcome.confidence,
                reason=outcome.reason,
                proof=outcome.proof,
                safety=evaluate_claim_safety(rule),
                claim_domain_trusted=is_trusted_claim_domain(rule.official_claim_url, rule.trusted_domains),
            )
        )
    return sort_evaluations(evaluations)


def _provider_proof(result: ProviderEligibilityResult) -> EvaluationProof:
    if result.status == "eligible":
        return EvaluationProof(met=(result.reason,))
    if result.status == "not_eligible":
        return EvaluationProof(unmet=(result.reason,))
    return EvaluationProof()


async def _evaluate_with_provider(
    wallet: str,
    rule: AirdropRule,
    http_client: httpx.AsyncClient,
) -> AirdropEvaluation:
    trusted = is_trusted_claim_domain(rule.official_claim_url, rule.trusted_domains)
    safety = evaluate_claim_safety(rule)
    try:
        provider = build_provider(rule, trusted, http_client)
        result = await provider.check_eligibility(wallet)
    except Exception as e:
        logger.warning(
            "eligibility_provider_failed",
            rule_id=rule.id,
            wallet=short_wallet(wallet),
            error=str(e),
        )
        result = ProviderEligibilityResult(
            status="unknown",
            confidence=0,
            reason=f"Eligibility provider failed: {e}",
        )
    return _build_evaluation(
        rule,
        status=result.status,
        confidence=result.confidence,
        reason=result.reason,
        proof=_provider_proof(result),
        safety=safety,
        claim_domain_trusted=trusted,
        claimable=result.claimable_amounts,
        provider_proof=result.proof,
    )


async def evaluate_with_providers(
    wallet: str,
    rules: Sequence[AirdropRule],
    http_client: httpx.AsyncClient,
) -> list[AirdropEvaluation]:
    """Provider mode: every campaign concurrently, merged once all have settled."""
    evaluations = await asyncio.gather(
        *(_evaluate_with_provider(wallet, rule, http_client) for rule in rules)
    )
    logger.info(
        "provider_evaluation_done",
        wallet=short_wallet(wallet),
        campaigns=len(evaluations),
        eligible=sum(1 for e in evaluations if e.status == "eligible"),
    )
    return sort_evaluations(evaluations)
