"""
Tests for inbound transfer extraction (transfers.extract_inbound_transfers).

Transactions are jsonParsed getTransaction payloads built as plain dicts.
"""

from __future__ import annotations

from airdrop_scout.history.transfers import (
    NATIVE_SOL_MINT,
    TOKEN_PROGRAM_ID,
    extract_inbound_transfers,
    score_native_transfer,
    senders_by_mint,
)

WALLET = "Wallet11111111111111111111111111111111111"
SENDER = "Sender11111111111111111111111111111111111"
MINT = "Mint1111111111111111111111111111111111111"


def _balance(index: int, amount: float | None, decimals: int = 6, owner: str = WALLET, mint: str = MINT) -> dict:
    return {
        "accountIndex": index,
        "mint": mint,
        "owner": owner,
        "uiTokenAmount": {"uiAmount": amount, "decimals": decimals},
    }


def _tx(
    pre: list[dict],
    post: list[dict],
    instructions: list[dict] | None = None,
    err=None,
    block_time: int | None = 1735689600,
    account_keys: list | None = None,
    pre_lamports: list[int] | None = None,
    post_lamports: list[int] | None = None,
) -> dict:
    return {
        "blockTime": block_time,
        "meta": {
            "err": err,
            "preTokenBalances": pre,
            "postTokenBalances": post,
            "preBalances": pre_lamports or [],
            "postBalances": post_lamports or [],
        },
        "transaction": {
            "message": {
                "accountKeys": account_keys or [],
                "instructions": instructions or [],
            }
        },
    }


def _transfer_ix(info: dict, program_id: str = TOKEN_PROGRAM_ID) -> dict:
    return {"programId": program_id, "parsed": {"type": "transferChecked", "info": info}}


def test_balance_increase_from_external_sender():
    """1 -> 3 with a parsed sender: one event of 2 tokens, confidence at least 0.55."""
    tx = _tx(
        pre=[_balance(1, 1)],
        post=[_balance(1, 3)],
        instructions=[_transfer_ix({"mint": MINT, "source": SENDER})],
    )
    events = extract_inbound_transfers(tx, WALLET, "sig-1")
    assert len(events) == 1
    event = events[0]
    assert event.ui_amount == 2
    assert event.mint == MINT
    assert event.amount == 2_000_000
    assert event.sender_address == SENDER
    assert event.confidence >= 0.55
    assert event.confidence == 0.55
    assert event.reasons == ("Inbound token balance increase detected", "Sender differs from recipient wallet")
    assert event.timestamp == 1735689600


def test_unknown_sender_scores_higher_and_is_likely_airdrop():
    tx = _tx(pre=[], post=[_balance(2, 5)])
    (event,) = extract_inbound_transfers(tx, WALLET, "sig-2")
    assert event.sender_address is None
    assert event.confidence == 0.6
    assert event.is_likely_airdrop is True
    assert "Sender unavailable in parsed instructions" in event.reason


def test_self_transfer_gets_no_sender_bonus():
    tx = _tx(
        pre=[_balance(1, 0)],
        post=[_balance(1, 1)],
        instructions=[_transfer_ix({"mint": MINT, "authority": WALLET})],
    )
    (event,) = extract_inbound_transfers(tx, WALLET, "sig-3")
    assert event.confidence == 0.4
    assert event.is_likely_airdrop is False


def test_large_multi_instruction_distribution_is_capped_at_one():
    noise = [{"programId": "ComputeBudget111111111111111111111111111111"}] * 3
    tx = _tx(pre=[], post=[_balance(1, 5000)], instructions=noise + [_transfer_ix({"mint": MINT})])
    (event,) = extract_inbound_transfers(tx, WALLET, "sig-4")
    # base 0.4 + unknown sender 0.2 + large 0.15 + multi-instruction 0.1
    assert event.confidence == 0.85
    assert "Large token distribution size" in event.reasons
    assert "Multi-instruction distribution transaction" in event.reasons
    assert event.confidence <= 1.0


def test_failed_transaction_yields_nothing():
    tx = _tx(pre=[], post=[_balance(1, 10)], err={"InstructionError": [0, "Custom"]})
    assert extract_inbound_transfers(tx, WALLET, "sig-5") == []


def test_missing_transaction_yields_nothing():
    assert extract_inbound_transfers(None, WALLET, "sig-6") == []


def test_decrease_and_other_owners_are_ignored():
    tx = _tx(
        pre=[_balance(1, 10), _balance(2, 0, owner=SENDER)],
        post=[_balance(1, 4), _balance(2, 6, owner=SENDER)],
    )
    assert extract_inbound_transfers(tx, WALLET, "sig-7") == []


def test_ui_amount_string_fallback():
    post = _balance(1, None)
    post["uiTokenAmount"]["uiAmountString"] = "7.5"
    (event,) = extract_inbound_transfers(_tx(pre=[], post=[post]), WALLET, "sig-8")
    assert event.ui_amount == 7.5


def test_signature_block_time_wins():
    tx = _tx(pre=[], post=[_balance(1, 1)], block_time=None)
    (event,) = extract_inbound_transfers(tx, WALLET, "sig-9", block_time=1700000000)
    assert event.timestamp == 1700000000
    (untimed,) = extract_inbound_transfers(tx, WALLET, "sig-9")
    assert untimed.timestamp == 0


def test_native_sol_received():
    tx = _tx(
        pre=[],
        post=[],
        account_keys=[{"pubkey": SENDER, "signer": True}, {"pubkey": WALLET, "signer": False}],
        pre_lamports=[5_000_000_000, 1_000_000_000],
        post_lamports=[4_750_000_000, 1_250_000_000],
    )
    (event,) = extract_inbound_transfers(tx, WALLET, "sig-10")
    assert event.mint == NATIVE_SOL_MINT
    assert event.native is True
    assert event.decimals == 9
    assert event.ui_amount == 0.25
    assert event.amount == 250_000_000
    assert event.reasons == ("SOL distribution / reward",)
    assert event.is_likely_airdrop is True


def test_native_sol_with_plain_string_account_keys():
    tx = _tx(
        pre=[],
        post=[],
        account_keys=[WALLET],
        pre_lamports=[0],
        post_lamports=[20_000_000],
    )
    (event,) = extract_inbound_transfers(tx, WALLET, "sig-11")
    assert event.reasons == ("SOL received",)
    assert event.is_likely_airdrop is False


def test_wrapped_sol_and_lamports_in_one_transaction_are_separate_events():
    tx = _tx(
        pre=[],
        post=[_balance(2, 2.0, decimals=9, mint=NATIVE_SOL_MINT)],
        account_keys=[SENDER, WALLET, "WsolAccount1111111111111111111111111111111"],
        pre_lamports=[5_000_000_000, 1_000_000_000, 0],
        post_lamports=[2_500_000_000, 1_500_000_000, 2_000_000_000],
    )
    token, native = extract_inbound_transfers(tx, WALLET, "sig-12")
    assert (token.mint, token.native, token.ui_amount) == (NATIVE_SOL_MINT, False, 2.0)
    assert (native.mint, native.native, native.ui_amount) == (NATIVE_SOL_MINT, True, 0.5)
    assert native.confidence == 0.7


def test_score_native_transfer_thresholds():
    assert score_native_transfer(0.005) is None
    assert score_native_transfer(0.01)[0] < 0.6
    assert score_native_transfer(0.05)[0] >= 0.6
    assert score_native_transfer(0.1) == (0.7, ("SOL distribution / reward",))


def test_senders_by_mint_skips_other_programs():
    tx = _tx(
        pre=[],
        post=[],
        instructions=[
            {"programId": "11111111111111111111111111111111", "parsed": {"info": {"mint": MINT, "source": SENDER}}},
            _transfer_ix({"mint": "Other", "authority": SENDER, "source": "ignored"}),
        ],
    )
    assert senders_by_mint(tx) == {"Other": SENDER}
