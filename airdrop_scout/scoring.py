"""
Calibration constants for every heuristic score in Airdrop Scout.

The rule-ratio cutoffs and the transfer-classifier weights carry over from
the first production version without a documented derivation. Treat them as
tunable calibration values, not proven ones; tests pin the current numbers.
"""

# --- Attribute-rule evaluation (ratio = passed checks / configured checks) ---
ELIGIBLE_RATIO = 0.8
LIKELY_RATIO = 0.5

# --- Claim-safety grading (additive score) ---
HTTPS_BONUS = 2
NON_HTTPS_PENALTY = -3
AT_SIGN_PENALTY = -3
PUNYCODE_PENALTY = -2
TRUSTED_HOST_BONUS = 2
UNTRUSTED_HOST_PENALTY = -2
HIGH_RISK_PENALTY = -1
SAFE_MIN_SCORE = 3
CAUTION_MIN_SCORE = 0

# --- Provider confidences (0-100) ---
CLAIM_API_ELIGIBLE_CONFIDENCE = 95
CLAIM_API_NOT_ELIGIBLE_CONFIDENCE = 90
CLAIM_API_HTTP_ERROR_CONFIDENCE = 15
CLAIM_API_UNREACHABLE_CONFIDENCE = 10
NO_PROVIDER_CONFIDENCE = 0

# --- Inbound token transfer classification (0.0-1.0) ---
TRANSFER_BASE_CONFIDENCE = 0.4
UNKNOWN_SENDER_BONUS = 0.2
EXTERNAL_SENDER_BONUS = 0.15
LARGE_AMOUNT_BONUS = 0.15
LARGE_AMOUNT_THRESHOLD = 100.0
MULTI_INSTRUCTION_BONUS = 0.10
MULTI_INSTRUCTION_MIN_COUNT = 3  # strictly more than this many instructions
MAX_CONFIDENCE = 1.0

# --- Inbound native SOL transfers (SOL units) ---
NATIVE_MIN_RECEIVED = 0.01
NATIVE_LIKELY_RECEIVED = 0.05
NATIVE_REWARD_RECEIVED = 0.1
NATIVE_REWARD_CONFIDENCE = 0.7
NATIVE_LIKELY_CONFIDENCE = 0.6
NATIVE_MINOR_CONFIDENCE = 0.3

# Single cut between "probably an airdrop" and "ordinary transfer"
LIKELY_AIRDROP_THRESHOLD = 0.6
