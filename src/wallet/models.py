from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.core.constants import LAMPORTS_PER_SOL


def lamports_to_sol(lamports: int) -> float:
    return lamports / LAMPORTS_PER_SOL


def sol_to_lamports(amount: float) -> int:
    """Convert SOL to lamports exactly.

    Raises:
        ValueError: When the amount is not a whole, positive number of lamports
    """
    try:
        lamports = Decimal(str(amount)) * LAMPORTS_PER_SOL
    except InvalidOperation as e:
        raise ValueError(f"Not a number: {amount!r}") from e
    if not lamports.is_finite() or lamports != lamports.to_integral_value():
        raise ValueError(f"{amount} SOL is not a whole number of lamports")
    if lamports < 1:
        raise ValueError(f"{amount} SOL is less than one lamport")
    return int(lamports)


class IntentAction(str, Enum):
    """Actions the assistant can resolve a query to"""

    GET_BALANCE = "get_balance"
    REQUEST_ADDRESS = "request_address"


class Intent(BaseModel):
    """Structured form of a user's free-text request.

    The aliases are the field names the LLM is asked to produce. Values are
    decoded here once: ``action`` must be a known ``IntentAction``, ``needsAddress``
    must be a boolean, and a ``publicKey`` of "none" becomes ``None``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    action: IntentAction = Field(
        ..., description="The action to perform (either 'get_balance' or 'request_address')")
    address: Optional[str] = Field(
        default=None,
        alias="publicKey",
        description="The Solana public key if provided in the query, or 'none' if not found",
    )
    needs_address: bool = Field(
        ...,
        alias="needsAddress",
        description="'true' if we need to ask the user for an address, 'false' otherwise",
    )

    @field_validator("action", mode="before")
    @classmethod
    def _normalize_action(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("address", mode="before")
    @classmethod
    def _none_marker(cls, value):
        if isinstance(value, str) and value.strip().lower() in ("", "none", "null"):
            return None
        return value

    @model_validator(mode="after")
    def _require_address(self) -> Intent:
        if self.address is None and not self.needs_address:
            # Frozen model: bypass __setattr__.
            object.__setattr__(self, "needs_address", True)
        return self


class BalanceReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    lamports: int = Field(..., ge=0)

    @property
    def sol(self) -> float:
        return lamports_to_sol(self.lamports)


class AirdropResult(BaseModel):
    """Outcome of a confirmed airdrop. Balances and delta are in lamports."""

    model_config = ConfigDict(frozen=True)

    address: str
    signature: str
    requested_amount: float
    requested_lamports: int
    initial_balance: int
    new_balance: int
    delta: int
    status: str = "confirmed"

    @property
    def initial_balance_sol(self) -> float:
        return lamports_to_sol(self.initial_balance)

    @property
    def new_balance_sol(self) -> float:
        return lamports_to_sol(self.new_balance)

    @property
    def delta_sol(self) -> float:
        return lamports_to_sol(self.delta)


class CreatedWallet(BaseModel):
    model_config = ConfigDict(frozen=True)

    public_key: str
    secret_key: str
