from typing import AsyncIterator

from fastapi import Depends
from langchain_ollama import ChatOllama

from src.core.config import get_settings, Settings
from src.intent.extractor import IntentExtractor
from src.services.wallet import WalletService
from src.solana.client import SolanaRpcClient
from src.solana.retry import RetryingBalanceReader, RetryPolicy
from src.workflow.airdrop import AirdropWorkflow


def get_settings_dependency() -> Settings:
    return get_settings()


def get_ollama(settings: Settings = Depends(get_settings_dependency)) -> ChatOllama:
    return ChatOllama(**settings.ollama_config)


async def get_rpc_client(
    settings: Settings = Depends(get_settings_dependency),
) -> AsyncIterator[SolanaRpcClient]:
    async with SolanaRpcClient(**settings.rpc_config) as client:
        yield client


def get_balance_reader(
    client: SolanaRpcClient = Depends(get_rpc_client),
    settings: Settings = Depends(get_settings_dependency),
) -> RetryingBalanceReader:
    policy = RetryPolicy(
        max_attempts=settings.BALANCE_MAX_ATTEMPTS,
        delay=settings.BALANCE_RETRY_DELAY,
        strategy=settings.BALANCE_RETRY_STRATEGY,
        max_delay=settings.BALANCE_RETRY_MAX_DELAY,
    )
    return RetryingBalanceReader(client, policy, commitment=settings.SOLANA_COMMITMENT)


def get_wallet_service(
    llm: ChatOllama = Depends(get_ollama),
    client: SolanaRpcClient = Depends(get_rpc_client),
    reader: RetryingBalanceReader = Depends(get_balance_reader),
    settings: Settings = Depends(get_settings_dependency),
) -> WalletService:
    return WalletService(
        extractor=IntentExtractor(llm),
        reader=reader,
        airdrop_factory=lambda: AirdropWorkflow(
            client,
            reader,
            commitment=settings.SOLANA_COMMITMENT,
            settle_delay=settings.AIRDROP_SETTLE_DELAY,
        ),
    )
