"""
Eligibility providers: one per verification mechanism.

A provider answers "is this wallet eligible for this campaign" through a
single coroutine, check_eligibility(wallet). build_provider() picks the
provider for a rule's verification_method. Every configuration gap resolves
to status "unknown" with confidence 0; providers never claim more certainty
than their mechanism can justify.

Providers hold no shared mutable state and are safe to run concurrently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, ConfigDict, Field

from airdrop_scout import scoring
from airdrop_scout.eligibility.models import (
    VERIFICATION_CLAIM_API,
    VERIFICATION_MANUAL,
    AirdropRule,
    ClaimableAmount,
    ProviderEligibilityResult,
)
from airdrop_scout.scout_logging import get_logger, short_wallet

logger = get_logger(__name__)


class EligibilityProvider(Protocol):
    rule: AirdropRule

    async def check_eligibility(self, wallet: str) -> ProviderEligibilityResult:
        ...


class ClaimApiPayload(BaseModel):
    """Response body of a project's claim API: {eligible, claimable?, reason?}."""

    model_config = ConfigDict(extra="ignore")

    eligible: bool = False
    claimable: list[Any] | None = Field(default=None)
    reason: str | None = None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_claimable(entries: list[Any] | None) -> tuple[ClaimableAmount, ...]:
    """Keep entries with a positive numeric amount and a symbol; drop the rest."""
    out: list[ClaimableAmount] = []
    for item in entries or []:
        if not isinstance(item, dict):
            continue
        amount = item.get("amount")
        symbol = item.get("symbol")
        if not _is_number(amount) or amount <= 0 or not symbol or not isinstance(symbol, str):
            continue
        usd = item.get("usd")
        mint = item.get("mint")
        out.append(
            ClaimableAmount(
                mint=mint if isinstance(mint, str) else None,
                symbol=symbol,
                ui_amount=float(amount),
                usd_value=float(usd) if _is_number(usd) else None,
                verified=True,
            )
        )
    return tuple(out)


@dataclass(frozen=True)
class UnsupportedProvider:
    """Default for unverified or unrecognized verification methods."""

    rule: AirdropRule

    async def check_eligibility(self, wallet: str) -> ProviderEligibilityResult:
        return ProviderEligibilityResult(
            status="unknown",
            confidence=scoring.NO_PROVIDER_CONFIDENCE,
            reason="No verified provider for this project yet. Marked unknown intentionally.",
        )


@dataclass(frozen=True)
class ManualVerifiedProvider:
    """A human flagged the campaign as verified; no machine check exists yet."""

    rule: AirdropRule

    async def check_eligibility(self, wallet: str) -> ProviderEligibilityResult:
        return ProviderEligibilityResult(
            status="unknown",
            confidence=scoring.NO_PROVIDER_CONFIDENCE,
            reason="Manual verified project configured, but no machine-verifiable method attached yet.",
        )


@dataclass(frozen=True)
class ClaimApiProvider:
    """
    Asks the project's official claim API about the wallet.

    claim_domain_trusted is computed by the caller; the provider refuses to
    query anything when the claim domain is not trusted.
    """

    rule: AirdropRule
    claim_domain_trusted: bool
    http_client: httpx.AsyncClient

    def _response_proof(self, response: httpx.Response, payload: ClaimApiPayload | None = None) -> dict[str, Any]:
        # endpoint as configured; the wallet query parameter is left out
        proof: dict[str, Any] = {
            "source": VERIFICATION_CLAIM_API,
            "endpoint": self.rule.claim_api_endpoint,
            "status_code": response.status_code,
        }
        if payload is not None:
            proof["eligible"] = payload.eligible
        return proof

    async def check_eligibility(self, wallet: str) -> ProviderEligibilityResult:
        if not self.rule.claim_api_endpoint:
            return ProviderEligibilityResult(
                status="unknown",
                confidence=scoring.NO_PROVIDER_CONFIDENCE,
                reason="Claim API endpoint not configured.",
            )
        if not self.claim_domain_trusted:
            return ProviderEligibilityResult(
                status="unknown",
                confidence=scoring.NO_PROVIDER_CONFIDENCE,
                reason="Claim URL domain is not trusted for this project.",
            )

        try:
            url = httpx.URL(self.rule.claim_api_endpoint).copy_set_param("wallet", wallet)
            response = await self.http_client.get(url, headers={"accept": "application/json"})
            if not response.is_success:
                logger.info(
                    "claim_api_http_error",
                    rule_id=self.rule.id,
                    wallet=short_wallet(wallet),
                    status_code=response.status_code,
                )
                return ProviderEligibilityResult(
                    status="unknown",
                    confidence=scoring.CLAIM_API_HTTP_ERROR_CONFIDENCE,
                    reason=f"Claim API error ({response.status_code}).",
                    proof=self._response_proof(response),
                )
            payload = ClaimApiPayload.model_validate(response.json())
        except Exception as e:
            logger.warning(
                "claim_api_unreachable",
                rule_id=self.rule.id,
                wallet=short_wallet(wallet),
                error=str(e),
            )
            return ProviderEligibilityResult(
                status="unknown",
                confidence=scoring.CLAIM_API_UNREACHABLE_CONFIDENCE,
                reason="Unable to reach claim API endpoint.",
            )

        claimable = parse_claimable(payload.claimable)
        if not payload.eligible:
            return ProviderEligibilityResult(
                status="not_eligible",
                confidence=scoring.CLAIM_API_NOT_ELIGIBLE_CONFIDENCE,
                reason=payload.reason or "Official claim API reports wallet is not eligible.",
                claimable_amounts=claimable,
                proof=self._response_proof(response, payload),
            )
        return ProviderEligibilityResult(
            status="eligible",
            confidence=scoring.CLAIM_API_ELIGIBLE_CONFIDENCE,
            reason=payload.reason or "Eligibility verified by official project claim API.",
            claimable_amounts=claimable,
            proof=self._response_proof(response, payload),
        )


def build_provider(
    rule: AirdropRule,
    claim_domain_trusted: bool,
    http_client: httpx.AsyncClient,
) -> EligibilityProvider:
    """Select the provider for rule.verification_method (Unsupported by default)."""
    if rule.verification_method == VERIFICATION_CLAIM_API:
        return ClaimApiProvider(rule=rule, claim_domain_trusted=claim_domain_trusted, http_client=http_client)
    if rule.verification_method == VERIFICATION_MANUAL:
        return ManualVerifiedProvider(rule=rule)
    return UnsupportedProvider(rule=rule)
