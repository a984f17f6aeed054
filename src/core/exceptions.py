from enum import Enum
from typing import Optional


class WalletError(Exception):
    """Base exception for wallet operations"""
    pass


class InvalidAddress(WalletError):
    """Raised when a string is not a well-formed base-58 address"""

    def __init__(self, address: object):
        self.address = address
        super().__init__(
            f"The provided address does not appear to be a valid Solana address: {address!r}")


class IntentParseError(WalletError):
    """Raised when the LLM output cannot be turned into an Intent"""
    pass


class RpcExhaustedError(WalletError):
    """Raised after every balance-fetch attempt has failed"""

    def __init__(self, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Balance fetch failed after {attempts} attempts: {last_error}")


class AirdropStage(str, Enum):
    """Workflow step at which an airdrop failed"""

    READ_INITIAL = "read_initial"
    SUBMIT = "submit"
    CONFIRM = "confirm"
    SETTLE = "settle"


class AirdropError(WalletError):
    """Raised when any airdrop step fails.

    ``stage`` tells whether the request was never submitted (read_initial, submit)
    or was submitted but not confirmed (confirm, settle).
    """

    def __init__(self, stage: AirdropStage, message: str, signature: Optional[str] = None):
        self.stage = stage
        self.signature = signature
        super().__init__(message)

    @property
    def submitted(self) -> bool:
        return self.signature is not None
