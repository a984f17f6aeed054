from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.wallet.models import sol_to_lamports


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class QueryRequest(_ApiModel):
    query: str = Field(..., min_length=1, max_length=4000,
                       description="Natural language question about a wallet")


class AirdropRequest(_ApiModel):
    public_key: str = Field(..., alias="publicKey", min_length=1)
    amount: float = Field(..., gt=0, description="Amount of SOL to request")

    @field_validator("amount")
    @classmethod
    def _whole_lamports(cls, value: float) -> float:
        sol_to_lamports(value)
        return value


class CreateWalletResponse(_ApiModel):
    public_key: str = Field(..., alias="publicKey")
    secret_key: str = Field(..., alias="secretKey")
    message: str = "New wallet created successfully"


class BalanceResponse(_ApiModel):
    public_key: str = Field(..., alias="publicKey")
    balance_in_lamports: int = Field(..., alias="balanceInLamports")
    balance_in_sol: float = Field(..., alias="balanceInSOL")
    message: str = "Balance fetched successfully"


class AirdropResponse(_ApiModel):
    public_key: str = Field(..., alias="publicKey")
    signature: str
    requested_amount: float = Field(..., alias="requestedAmount")
    initial_balance_sol: float = Field(..., alias="initialBalanceSOL")
    new_balance_sol: float = Field(..., alias="newBalanceSOL")
    actual_change_sol: float = Field(..., alias="actualChangeSOL")
    message: str = "Airdrop successful"
    status: str = "confirmed"


class NaturalBalanceResponse(_ApiModel):
    status: str
    message: str
    public_key: Optional[str] = Field(default=None, alias="publicKey")
    balance_in_lamports: Optional[int] = Field(default=None, alias="balanceInLamports")
    balance_in_sol: Optional[float] = Field(default=None, alias="balanceInSOL")


class ErrorResponse(_ApiModel):
    error: str
    message: str
    stage: Optional[str] = None
    signature: Optional[str] = None
