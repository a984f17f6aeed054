import base64
import logging
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel
from solders.keypair import Keypair

from src.intent.extractor import IntentExtractor
from src.solana.retry import RetryingBalanceReader
from src.wallet.address import parse_address
from src.wallet.models import (
    AirdropResult,
    BalanceReading,
    CreatedWallet,
    Intent,
    IntentAction,
)
from src.workflow.airdrop import AirdropWorkflow

logger = logging.getLogger(__name__)


class AnswerStatus(str, Enum):
    NEEDS_ADDRESS = "needs_address"
    SUCCESS = "success"


class NaturalBalanceAnswer(BaseModel):
    status: AnswerStatus
    intent: Intent
    reading: Optional[BalanceReading] = None


class WalletService:
    """Operations exposed to the HTTP layer.

    Every call validates its address before any RPC traffic and builds fresh
    values; nothing is shared between requests.
    """

    def __init__(
        self,
        extractor: IntentExtractor,
        reader: RetryingBalanceReader,
        airdrop_factory: Callable[[], AirdropWorkflow],
    ):
        self.extractor = extractor
        self.reader = reader
        self.airdrop_factory = airdrop_factory
        self._airdrop: Optional[AirdropWorkflow] = None

    @property
    def airdrop(self) -> AirdropWorkflow:
        # Built on the first airdrop request only.
        if self._airdrop is None:
            self._airdrop = self.airdrop_factory()
        return self._airdrop

    async def resolve_intent(self, query: str) -> Intent:
        intent = await self.extractor.extract(query)
        logger.info("Resolved intent: action=%s needs_address=%s",
                    intent.action.value, intent.needs_address)
        return intent

    async def get_balance(self, address: str) -> BalanceReading:
        valid = parse_address(address)
        lamports = await self.reader.fetch_balance(valid)
        return BalanceReading(address=str(valid), lamports=lamports)

    async def request_airdrop(self, address: str, amount: float) -> AirdropResult:
        valid = parse_address(address)
        return await self.airdrop.run(str(valid), amount)

    async def answer_balance_query(self, query: str) -> NaturalBalanceAnswer:
        intent = await self.resolve_intent(query)
        if intent.needs_address or intent.action == IntentAction.REQUEST_ADDRESS:
            return NaturalBalanceAnswer(status=AnswerStatus.NEEDS_ADDRESS, intent=intent)

        reading = await self.get_balance(intent.address)
        return NaturalBalanceAnswer(status=AnswerStatus.SUCCESS, intent=intent, reading=reading)


def create_wallet() -> CreatedWallet:
    keypair = Keypair()
    return CreatedWallet(
        public_key=str(keypair.pubkey()),
        secret_key=base64.b64encode(bytes(keypair)).decode("ascii"),
    )
