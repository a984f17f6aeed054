from fastapi import APIRouter, Depends
from typing import Annotated

from .schemas import (
    AirdropRequest,
    AirdropResponse,
    BalanceResponse,
    CreateWalletResponse,
    ErrorResponse,
    NaturalBalanceResponse,
    QueryRequest,
)
from .dependencies import get_wallet_service
from src.services.wallet import AnswerStatus, WalletService, create_wallet
from src.wallet.models import Intent


router = APIRouter(prefix="/api", tags=["Wallet"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid address"},
    502: {"model": ErrorResponse, "description": "Ledger RPC failure"},
}

Service = Annotated[WalletService, Depends(get_wallet_service)]


@router.post("/wallet/create", response_model=CreateWalletResponse)
async def create() -> CreateWalletResponse:
    wallet = create_wallet()
    return CreateWalletResponse(public_key=wallet.public_key, secret_key=wallet.secret_key)


@router.get(
    "/wallet/balance/{public_key}",
    response_model=BalanceResponse,
    responses=ERROR_RESPONSES,
)
async def balance(public_key: str, service: Service) -> BalanceResponse:
    reading = await service.get_balance(public_key)
    return BalanceResponse(
        public_key=reading.address,
        balance_in_lamports=reading.lamports,
        balance_in_sol=reading.sol,
    )


@router.post(
    "/wallet/airdrop",
    response_model=AirdropResponse,
    responses=ERROR_RESPONSES,
)
async def airdrop(request: AirdropRequest, service: Service) -> AirdropResponse:
    result = await service.request_airdrop(request.public_key, request.amount)
    return AirdropResponse(
        public_key=result.address,
        signature=result.signature,
        requested_amount=result.requested_amount,
        initial_balance_sol=result.initial_balance_sol,
        new_balance_sol=result.new_balance_sol,
        actual_change_sol=result.delta_sol,
        status=result.status,
    )


@router.post(
    "/natural/balance",
    response_model=NaturalBalanceResponse,
    response_model_exclude_none=True,
    responses={
        **ERROR_RESPONSES,
        500: {"model": ErrorResponse, "description": "Query could not be processed"},
    },
)
async def natural_balance(request: QueryRequest, service: Service) -> NaturalBalanceResponse:
    """
    Answers a free-text balance question, asking for an address when none is given.
    """
    answer = await service.answer_balance_query(request.query)
    if answer.status == AnswerStatus.NEEDS_ADDRESS:
        return NaturalBalanceResponse(
            status=answer.status.value,
            message="Please provide a Solana wallet address to check the balance",
        )
    return NaturalBalanceResponse(
        status=answer.status.value,
        message="Balance fetched successfully",
        public_key=answer.reading.address,
        balance_in_lamports=answer.reading.lamports,
        balance_in_sol=answer.reading.sol,
    )


@router.post(
    "/natural/intent",
    response_model=Intent,
    responses={500: {"model": ErrorResponse, "description": "Query could not be processed"}},
)
async def natural_intent(request: QueryRequest, service: Service) -> Intent:
    return await service.resolve_intent(request.query)
