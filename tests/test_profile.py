"""
Tests for building a WalletProfile from raw RPC records.
"""

from __future__ import annotations

from airdrop_scout.eligibility.models import WalletProfile

NOW = 1_735_689_600
DAY = 86_400


def _token_account(mint: str, ui_amount: float, decimals: int = 6) -> dict:
    return {
        "pubkey": "acct",
        "account": {
            "data": {
                "parsed": {
                    "info": {
                        "mint": mint,
                        "tokenAmount": {"uiAmount": ui_amount, "decimals": decimals},
                    }
                }
            }
        },
    }


def test_from_chain_data():
    accounts = [
        _token_account("JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN", 120.0),
        _token_account("NftMint1111111111111111111111111111111111", 1, decimals=0),
        _token_account("JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN", 3.0),
    ]
    signatures = [
        {"signature": "newest", "blockTime": NOW - 2 * DAY - 5},
        {"signature": "middle", "blockTime": None},
        {"signature": "oldest", "blockTime": NOW - 400 * DAY},
    ]
    profile = WalletProfile.from_chain_data("Wallet1", 2_500_000_000, accounts, signatures, now=NOW)
    assert profile.sol_balance == 2.5
    assert profile.token_symbols == ("JUPY", "NFTM")
    assert profile.token_accounts_count == 3
    assert profile.nft_approx_count == 1
    assert profile.recent_transaction_count == 3
    assert profile.account_age_days == 400
    assert profile.last_active_days == 2


def test_from_chain_data_empty_wallet():
    profile = WalletProfile.from_chain_data("Wallet1", 0, [], [], now=NOW)
    assert profile.sol_balance == 0
    assert profile.token_symbols == ()
    assert profile.account_age_days is None
    assert profile.last_active_days is None
