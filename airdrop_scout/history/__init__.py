"""
Historical transfer classifier: finds inbound token and SOL transfers in a
wallet's recent transactions and scores how likely each was an airdrop.
"""

from airdrop_scout.history.models import PastAirdrop, TransferEvent
from airdrop_scout.history.scanner import scan_past_airdrops
from airdrop_scout.history.transfers import extract_inbound_transfers

__all__ = ["PastAirdrop", "TransferEvent", "extract_inbound_transfers", "scan_past_airdrops"]
