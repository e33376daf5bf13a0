"""
Claim-destination safety grading.

Scores a campaign's claim URL with a small additive heuristic (weights in
airdrop_scout.scoring) and returns safe / caution / risky plus the ordered
reasons that produced the score. Deterministic; never raises.
"""

from __future__ import annotations

from airdrop_scout import scoring
from airdrop_scout.eligibility.models import AirdropRule, ClaimSafety, SafetyGrade
from airdrop_scout.eligibility.trusted_domains import matches_trusted_host, normalize_host, parse_url

INVALID_HOSTNAME = "invalid-url"
# Announcement-only hosts: a campaign announced on X does not make x.com a claim domain.
SOCIAL_ANNOUNCEMENT_HOSTS = frozenset({"x.com", "twitter.com"})


def _grade(score: int) -> SafetyGrade:
    if score >= scoring.SAFE_MIN_SCORE:
        return "safe"
    if score >= scoring.CAUTION_MIN_SCORE:
        return "caution"
    return "risky"


def _source_host(source_url: str) -> str:
    parts = parse_url(source_url)
    if parts is None:
        return ""
    host = normalize_host(parts.hostname or "")
    return "" if host in SOCIAL_ANNOUNCEMENT_HOSTS else host


def evaluate_claim_safety(rule: AirdropRule) -> ClaimSafety:
    claim_url = rule.official_claim_url or ""
    parts = parse_url(claim_url)
    if parts is None:
        return ClaimSafety(grade="risky", reasons=("Invalid claim URL format",), hostname=INVALID_HOSTNAME)

    hostname = normalize_host(parts.hostname or "")
    trusted = [d for d in (*rule.trusted_domains, hostname, _source_host(rule.source_url)) if d]

    score = 0
    reasons: list[str] = []

    if parts.scheme.lower() == "https":
        score += scoring.HTTPS_BONUS
        reasons.append("HTTPS enabled")
    else:
        score += scoring.NON_HTTPS_PENALTY
        reasons.append("Non-HTTPS claim URL")

    if "@" in claim_url:
        score += scoring.AT_SIGN_PENALTY
        reasons.append("URL contains @ symbol")

    if "xn--" in hostname:
        score += scoring.PUNYCODE_PENALTY
        reasons.append("Punycode domain detected")

    if matches_trusted_host(hostname, trusted):
        score += scoring.TRUSTED_HOST_BONUS
        reasons.append("Domain matches trusted host list")
    else:
        score += scoring.UNTRUSTED_HOST_PENALTY
        reasons.append("Domain does not match trusted host list")

    if rule.risk_level == "high":
        score += scoring.HIGH_RISK_PENALTY
        reasons.append("Project marked high risk")

    return ClaimSafety(grade=_grade(score), reasons=tuple(reasons), hostname=hostname)
