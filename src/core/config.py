from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import AppSettings, Commitment, OllamaModels, RetryStrategy


class Settings(BaseSettings):
    """Application settings loaded from environment + defaults"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    ENVIRONMENT: str = AppSettings.ENVIRONMENT
    LOG_LEVEL: str = AppSettings.LOG_LEVEL

    OLLAMA_MODEL: OllamaModels = AppSettings.OLLAMA_MODEL
    OLLAMA_BASE_URL: str = AppSettings.OLLAMA_BASE_URL
    LLM_TEMPERATURE: float = AppSettings.LLM_TEMPERATURE

    SOLANA_RPC_URL: str = AppSettings.SOLANA_RPC_URL
    SOLANA_COMMITMENT: Commitment = AppSettings.SOLANA_COMMITMENT
    RPC_TIMEOUT: float = AppSettings.RPC_TIMEOUT

    BALANCE_MAX_ATTEMPTS: int = AppSettings.BALANCE_MAX_ATTEMPTS
    BALANCE_RETRY_DELAY: float = AppSettings.BALANCE_RETRY_DELAY
    BALANCE_RETRY_STRATEGY: RetryStrategy = AppSettings.BALANCE_RETRY_STRATEGY
    BALANCE_RETRY_MAX_DELAY: float = AppSettings.BALANCE_RETRY_MAX_DELAY

    CONFIRM_TIMEOUT: float = AppSettings.CONFIRM_TIMEOUT
    CONFIRM_POLL_INTERVAL: float = AppSettings.CONFIRM_POLL_INTERVAL
    AIRDROP_SETTLE_DELAY: float = AppSettings.AIRDROP_SETTLE_DELAY

    CORS_ALLOW_ORIGINS: List[str] = AppSettings.CORS_ALLOW_ORIGINS

    @property
    def ollama_config(self) -> dict:
        return {
            "model": self.OLLAMA_MODEL.value,
            "base_url": self.OLLAMA_BASE_URL,
            "temperature": self.LLM_TEMPERATURE,
        }

    @property
    def rpc_config(self) -> dict:
        return {
            "rpc_url": self.SOLANA_RPC_URL,
            "timeout": self.RPC_TIMEOUT,
            "confirm_timeout": self.CONFIRM_TIMEOUT,
            "poll_interval": self.CONFIRM_POLL_INTERVAL,
        }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
