import asyncio
import logging
from typing import Any, Dict, Optional, TypedDict

from langgraph.graph import END, StateGraph

from src.core.constants import AppSettings, Commitment
from src.core.exceptions import AirdropError, AirdropStage, RpcExhaustedError
from src.solana.client import SolanaRpcClient
from src.solana.retry import RetryingBalanceReader, Sleep
from src.wallet.models import AirdropResult, sol_to_lamports

logger = logging.getLogger(__name__)


class AirdropState(TypedDict, total=False):
    """State carried between airdrop steps."""
    address: str
    amount: float
    lamports: int
    initial_balance: int
    signature: str
    confirmation_status: Optional[str]
    new_balance: int
    result: AirdropResult


class AirdropWorkflow:
    """Airdrop as a linear LangGraph workflow.

    read_initial -> submit -> confirm -> settle -> compute. A failing step raises
    ``AirdropError`` and the graph stops there, so no partial result escapes.
    """

    def __init__(
        self,
        client: SolanaRpcClient,
        reader: RetryingBalanceReader,
        commitment: Commitment = AppSettings.SOLANA_COMMITMENT,
        settle_delay: float = AppSettings.AIRDROP_SETTLE_DELAY,
        sleep: Sleep = asyncio.sleep,
    ):
        self.client = client
        self.reader = reader
        self.commitment = commitment
        self.settle_delay = settle_delay
        self.sleep = sleep
        self.graph = self._build_graph()

    async def _read_initial(self, state: AirdropState) -> Dict[str, Any]:
        try:
            balance = await self.reader.fetch_balance(state["address"])
        except RpcExhaustedError as e:
            raise AirdropError(
                AirdropStage.READ_INITIAL, f"Initial balance read failed: {e}") from e
        return {"initial_balance": balance}

    async def _submit(self, state: AirdropState) -> Dict[str, Any]:
        try:
            signature = await self.client.request_airdrop(state["address"], state["lamports"])
        except Exception as e:
            raise AirdropError(AirdropStage.SUBMIT, f"Airdrop request failed: {e}") from e
        logger.info("Airdrop of %d lamports to %s submitted: %s",
                    state["lamports"], state["address"], signature)
        return {"signature": signature}

    async def _confirm(self, state: AirdropState) -> Dict[str, Any]:
        signature = state["signature"]
        try:
            confirmation = await self.client.confirm_transaction(signature, self.commitment)
        except Exception as e:
            raise AirdropError(
                AirdropStage.CONFIRM,
                f"Transaction confirmation failed: {e}",
                signature=signature,
            ) from e
        if confirmation.err is not None:
            raise AirdropError(
                AirdropStage.CONFIRM,
                f"Transaction failed: {confirmation.err}",
                signature=signature,
            )
        return {"confirmation_status": confirmation.confirmation_status}

    async def _settle(self, state: AirdropState) -> Dict[str, Any]:
        await self.sleep(self.settle_delay)
        try:
            balance = await self.reader.fetch_balance(state["address"])
        except RpcExhaustedError as e:
            raise AirdropError(
                AirdropStage.SETTLE,
                f"Balance read after confirmation failed: {e}",
                signature=state["signature"],
            ) from e
        return {"new_balance": balance}

    async def _compute(self, state: AirdropState) -> Dict[str, Any]:
        result = AirdropResult(
            address=state["address"],
            signature=state["signature"],
            requested_amount=state["amount"],
            requested_lamports=state["lamports"],
            initial_balance=state["initial_balance"],
            new_balance=state["new_balance"],
            delta=state["new_balance"] - state["initial_balance"],
            status="confirmed",
        )
        return {"result": result}

    def _build_graph(self):
        graph = StateGraph(AirdropState)

        steps = [
            ("read_initial", self._read_initial),
            ("submit", self._submit),
            ("confirm", self._confirm),
            ("settle", self._settle),
            ("compute", self._compute),
        ]
        for name, node in steps:
            graph.add_node(name, node)
        for (current, _), (following, _) in zip(steps, steps[1:]):
            graph.add_edge(current, following)

        graph.set_entry_point(steps[0][0])
        graph.add_edge(steps[-1][0], END)
        return graph.compile()

    async def run(self, address: str, amount: float) -> AirdropResult:
        initial_state: AirdropState = {
            "address": address,
            "amount": amount,
            "lamports": sol_to_lamports(amount),
        }
        logger.info("Starting airdrop of %s SOL to %s", amount, address)
        final_state = await self.graph.ainvoke(initial_state)
        result: Optional[AirdropResult] = final_state.get("result")
        logger.info("Airdrop %s confirmed, delta=%d lamports", result.signature, result.delta)
        return result
