import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    stop_after_attempt,
    wait_exponential_jitter,
    wait_fixed,
)

from src.core.constants import AppSettings, Commitment, RetryStrategy
from src.core.exceptions import RpcExhaustedError
from src.solana.client import SolanaRpcClient

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how patiently a balance read is retried"""

    max_attempts: int = AppSettings.BALANCE_MAX_ATTEMPTS
    delay: float = AppSettings.BALANCE_RETRY_DELAY
    strategy: RetryStrategy = AppSettings.BALANCE_RETRY_STRATEGY
    max_delay: float = AppSettings.BALANCE_RETRY_MAX_DELAY

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def wait(self):
        if self.strategy == RetryStrategy.EXPONENTIAL_JITTER:
            return wait_exponential_jitter(initial=self.delay, max=self.max_delay)
        return wait_fixed(self.delay)


def _log_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "Balance fetch attempt %d failed (%s), retrying in %.2fs",
        retry_state.attempt_number,
        retry_state.outcome.exception(),
        retry_state.next_action.sleep if retry_state.next_action else 0.0,
    )


class RetryingBalanceReader:
    """Balance reads with a bounded retry budget.

    Every failure below the budget waits according to the policy; when the last
    attempt fails, ``RpcExhaustedError`` is raised carrying that attempt's error.
    """

    def __init__(
        self,
        client: SolanaRpcClient,
        policy: RetryPolicy = RetryPolicy(),
        commitment: Commitment = AppSettings.SOLANA_COMMITMENT,
        sleep: Sleep = asyncio.sleep,
    ):
        self.client = client
        self.policy = policy
        self.commitment = commitment
        self.sleep = sleep

    async def fetch_balance(self, address: str) -> int:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.policy.max_attempts),
            wait=self.policy.wait(),
            before_sleep=_log_retry,
            sleep=self.sleep,
        )
        try:
            return await retrying(self.client.get_balance, address, self.commitment)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            logger.error(
                "Balance fetch for %s exhausted %d attempts", address, self.policy.max_attempts)
            raise RpcExhaustedError(self.policy.max_attempts, last_error) from last_error
