"""
Application-level exceptions.

Configuration gaps and collaborator failures are not exceptions in the
engine: they degrade to an "unknown" result. These classes cover the few
places where the caller must be told something went wrong.
"""


class ScoutError(Exception):
    """Base class for Airdrop Scout errors."""


class InvalidWalletAddress(ScoutError, ValueError):
    """Wallet address is empty or not a valid base58 Solana public key."""

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"Invalid Solana wallet address: {address!r}")


class ChainDataError(ScoutError):
    """Solana RPC transport failure or JSON-RPC error response."""

    def __init__(self, method: str, detail: object) -> None:
        self.method = method
        self.detail = detail
        super().__init__(f"{method} failed: {detail}")
