"""
Tests for eligibility providers (providers.build_provider and friends).

The claim API is faked with httpx.MockTransport.
"""

from __future__ import annotations

import asyncio

import httpx

from conftest import WALLET, make_rule, mock_client

from airdrop_scout.eligibility.providers import (
    ClaimApiProvider,
    ManualVerifiedProvider,
    UnsupportedProvider,
    build_provider,
    parse_claimable,
)

CLAIM_API = "https://api.jup.ag/eligibility"


def _claim_rule(**overrides):
    data = {"verification_method": "claim_api", "claim_api_endpoint": CLAIM_API}
    data.update(overrides)
    return make_rule(**data)


def _check(rule, handler, trusted=True):
    async def run():
        async with mock_client(handler) as client:
            provider = build_provider(rule, trusted, client)
            return await provider.check_eligibility(WALLET)

    return asyncio.run(run())


def _never_called(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


def test_build_provider_dispatch():
    client = httpx.AsyncClient()
    assert isinstance(build_provider(make_rule(), True, client), UnsupportedProvider)
    assert isinstance(build_provider(make_rule(verification_method="manual_verified"), True, client), ManualVerifiedProvider)
    assert isinstance(build_provider(_claim_rule(), True, client), ClaimApiProvider)
    assert isinstance(
        build_provider(make_rule(verification_method="distributor_program"), True, client),
        UnsupportedProvider,
    )
    assert isinstance(build_provider(make_rule(verification_method="mystery"), True, client), UnsupportedProvider)


def test_unsupported_provider_is_unknown_zero():
    result = _check(make_rule(), _never_called)
    assert result.status == "unknown"
    assert result.confidence == 0
    assert "No verified provider" in result.reason


def test_manual_verified_provider_is_unknown_zero():
    result = _check(make_rule(verification_method="manual_verified"), _never_called)
    assert result.status == "unknown"
    assert result.confidence == 0


def test_claim_api_without_endpoint_is_unknown():
    result = _check(_claim_rule(claim_api_endpoint=None), _never_called)
    assert (result.status, result.confidence) == ("unknown", 0)
    assert result.reason == "Claim API endpoint not configured."


def test_claim_api_untrusted_domain_makes_no_request():
    result = _check(_claim_rule(), _never_called, trusted=False)
    assert (result.status, result.confidence) == ("unknown", 0)
    assert result.reason == "Claim URL domain is not trusted for this project."


def test_claim_api_eligible_with_claimable_amounts():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["wallet"] = request.url.params.get("wallet")
        seen["accept"] = request.headers.get("accept")
        return httpx.Response(
            200,
            json={
                "eligible": True,
                "claimable": [
                    {"symbol": "JUP", "amount": 120.5, "usd": 90.25, "mint": "JUPmint"},
                    {"symbol": "BAD", "amount": 0},
                    {"symbol": "BAD", "amount": "12"},
                    {"amount": 5},
                ],
            },
        )

    result = _check(_claim_rule(), handler)
    assert seen == {"wallet": WALLET, "accept": "application/json"}
    assert result.status == "eligible"
    assert result.confidence == 95
    assert result.reason == "Eligibility verified by official project claim API."
    assert len(result.claimable_amounts) == 1
    amount = result.claimable_amounts[0]
    assert (amount.symbol, amount.ui_amount, amount.usd_value, amount.verified) == ("JUP", 120.5, 90.25, True)
    assert result.proof == {"source": "claim_api", "endpoint": CLAIM_API, "status_code": 200, "eligible": True}


def test_claim_api_not_eligible_uses_api_reason():
    result = _check(
        _claim_rule(),
        lambda request: httpx.Response(200, json={"eligible": False, "reason": "Snapshot missed"}),
    )
    assert (result.status, result.confidence, result.reason) == ("not_eligible", 90, "Snapshot missed")


def test_claim_api_http_error_is_unknown_15():
    result = _check(_claim_rule(), lambda request: httpx.Response(500, text="boom"))
    assert result.status == "unknown"
    assert result.confidence == 15
    assert "500" in result.reason
    assert result.proof == {"source": "claim_api", "endpoint": CLAIM_API, "status_code": 500}


def test_claim_api_transport_error_is_unknown_10():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = _check(_claim_rule(), handler)
    assert (result.status, result.confidence) == ("unknown", 10)
    assert result.reason == "Unable to reach claim API endpoint."
    assert result.proof is None


def test_claim_api_invalid_json_is_unknown_10():
    result = _check(_claim_rule(), lambda request: httpx.Response(200, text="<html>"))
    assert (result.status, result.confidence) == ("unknown", 10)


def test_parse_claimable_handles_none():
    assert parse_claimable(None) == ()
