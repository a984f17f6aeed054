from enum import Enum


LAMPORTS_PER_SOL = 1_000_000_000


class OllamaModels(Enum):
    """Supported Ollama model identifiers"""

    LLAMA3_8B = "llama3.1:8b"
    LLAMA3_70B = "llama3:70b"
    MISTRAL_7B = "mistral:7b"
    GEMMA_2_9B = "gemma2:9b"


class Commitment(str, Enum):
    """Ledger commitment levels, ordered from weakest to strongest"""

    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"

    @property
    def rank(self) -> int:
        return list(Commitment).index(self)


class RetryStrategy(str, Enum):
    """Backoff strategies for retried RPC reads"""

    FIXED = "fixed"
    EXPONENTIAL_JITTER = "exponential_jitter"


class AppSettings:
    """Central place for all application-level configuration"""

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    OLLAMA_MODEL: OllamaModels = OllamaModels.LLAMA3_8B
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    LLM_TEMPERATURE: float = 0.0

    SOLANA_RPC_URL: str = "https://api.devnet.solana.com"
    SOLANA_COMMITMENT: Commitment = Commitment.CONFIRMED
    RPC_TIMEOUT: float = 30.0

    BALANCE_MAX_ATTEMPTS: int = 5
    BALANCE_RETRY_DELAY: float = 1.0
    BALANCE_RETRY_STRATEGY: RetryStrategy = RetryStrategy.FIXED
    BALANCE_RETRY_MAX_DELAY: float = 10.0

    CONFIRM_TIMEOUT: float = 60.0
    CONFIRM_POLL_INTERVAL: float = 0.5
    AIRDROP_SETTLE_DELAY: float = 2.0

    CORS_ALLOW_ORIGINS = ["*"]
