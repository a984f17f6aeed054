from __future__ import annotations

import itertools
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception,
    retry_if_exception_type,
    retry_if_result,
    stop_after_delay,
    wait_fixed,
)

from src.core.constants import AppSettings, Commitment

logger = logging.getLogger(__name__)


class RpcMethod(Enum):
    """JSON-RPC methods used against the ledger node"""

    GET_BALANCE = "getBalance"
    REQUEST_AIRDROP = "requestAirdrop"
    GET_SIGNATURE_STATUSES = "getSignatureStatuses"


class RpcError(Exception):
    """Base exception for ledger RPC errors"""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)

    @property
    def transient(self) -> bool:
        """Rate limiting and node-side failures are worth another poll"""
        return self.code is not None and (self.code == 429 or self.code >= 500)


class ConfirmationTimeoutError(RpcError):
    """Raised when a transaction does not reach the wanted commitment in time"""
    pass


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, RpcError) and exc.transient


class ConfirmationResult(BaseModel):
    """Final status of a submitted transaction"""

    signature: str
    err: Optional[Any] = None
    confirmation_status: Optional[str] = None


class SolanaRpcClient:
    """
    Async JSON-RPC client for a Solana node.

    Features:
    - getBalance / requestAirdrop wrappers returning plain values
    - Confirmation polling over getSignatureStatuses with a deadline
    - JSON-RPC error objects surfaced as RpcError
    - Async context manager support
    """

    def __init__(
        self,
        rpc_url: str = AppSettings.SOLANA_RPC_URL,
        timeout: float = AppSettings.RPC_TIMEOUT,
        confirm_timeout: float = AppSettings.CONFIRM_TIMEOUT,
        poll_interval: float = AppSettings.CONFIRM_POLL_INTERVAL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.rpc_url = rpc_url
        self.timeout = httpx.Timeout(timeout)
        self.confirm_timeout = confirm_timeout
        self.poll_interval = poll_interval

        self._http_client = httpx.AsyncClient(
            timeout=self.timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )
        self._ids = itertools.count(1)

    async def _request(self, method: RpcMethod, params: List[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method.value,
            "params": params,
        }
        try:
            response = await self._http_client.post(self.rpc_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RpcError(
                f"{method.value} failed: HTTP {e.response.status_code}",
                code=e.response.status_code,
            ) from e

        body = response.json()
        if body.get("error"):
            error = body["error"]
            raise RpcError(
                f"{method.value} failed: {error.get('message', error)}",
                code=error.get("code"),
            )
        if "result" not in body:
            raise RpcError(f"{method.value} returned no result")
        return body["result"]

    async def get_balance(
        self,
        address: str,
        commitment: Commitment = AppSettings.SOLANA_COMMITMENT,
    ) -> int:
        result = await self._request(
            RpcMethod.GET_BALANCE,
            [address, {"commitment": Commitment(commitment).value}],
        )
        return int(result["value"])

    async def request_airdrop(self, address: str, lamports: int) -> str:
        return await self._request(RpcMethod.REQUEST_AIRDROP, [address, lamports])

    async def get_signature_status(self, signature: str) -> Optional[Dict[str, Any]]:
        result = await self._request(
            RpcMethod.GET_SIGNATURE_STATUSES,
            [[signature], {"searchTransactionHistory": False}],
        )
        if not isinstance(result, dict):
            raise RpcError(f"getSignatureStatuses returned an unexpected result: {result!r}")
        statuses = result.get("value") or [None]
        status = statuses[0]
        if status is None:
            return None
        if not isinstance(status, dict):
            raise RpcError(f"Malformed signature status for {signature}: {status!r}")
        reached = status.get("confirmationStatus")
        if reached is not None and reached not in {c.value for c in Commitment}:
            raise RpcError(f"Unknown confirmation status for {signature}: {reached!r}")
        return status

    async def confirm_transaction(
        self,
        signature: str,
        commitment: Commitment = AppSettings.SOLANA_COMMITMENT,
    ) -> ConfirmationResult:
        """
        Poll until the transaction reaches ``commitment`` or reports an error

        Raises:
            ConfirmationTimeoutError: When the deadline passes first
            RpcError: On a non-transient RPC failure
        """
        wanted = Commitment(commitment)

        def pending(status: Optional[Dict[str, Any]]) -> bool:
            if status is None:
                return True
            if status.get("err") is not None:
                return False
            reached = status.get("confirmationStatus")
            if reached is None:
                # Rooted transactions report no status string.
                return False
            return Commitment(reached).rank < wanted.rank

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_delay(self.confirm_timeout),
                wait=wait_fixed(self.poll_interval),
                retry=(
                    retry_if_result(pending)
                    | retry_if_exception_type(httpx.TransportError)
                    | retry_if_exception(_is_transient)
                ),
            ):
                with attempt:
                    status = await self.get_signature_status(signature)
                if not attempt.retry_state.outcome.failed:
                    attempt.retry_state.set_result(status)
        except RetryError as e:
            raise ConfirmationTimeoutError(
                f"Transaction {signature} was not {wanted.value} within "
                f"{self.confirm_timeout:.0f} seconds"
            ) from e

        logger.info("Signature %s status: %s", signature, status)
        return ConfirmationResult(
            signature=signature,
            err=status.get("err"),
            confirmation_status=status.get("confirmationStatus"),
        )

    async def close(self) -> None:
        """Close underlying HTTP client"""
        await self._http_client.aclose()

    async def __aenter__(self) -> SolanaRpcClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
