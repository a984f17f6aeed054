import json
from typing import Any, Callable, Dict, List

import httpx
import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from src.solana.client import SolanaRpcClient


VALID_ADDRESS = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


def intent_json(action: str, public_key: str, needs_address: str) -> str:
    body = json.dumps(
        {"action": action, "publicKey": public_key, "needsAddress": needs_address})
    return f"```json\n{body}\n```"


@pytest.fixture
def valid_address():
    return VALID_ADDRESS


@pytest.fixture
def fake_llm():
    """Chat model answering with the given completions in order"""
    def build(*responses: str) -> FakeListChatModel:
        return FakeListChatModel(responses=list(responses))

    return build


@pytest.fixture
def rpc_requests() -> List[Dict[str, Any]]:
    return []


@pytest.fixture
def rpc_client_factory(rpc_requests):
    """Build a SolanaRpcClient whose node answers from a method -> handler map.

    A handler returns the JSON-RPC body fields, or a ready httpx.Response.
    """
    def build(handlers: Dict[str, Callable[[list], Any]], **kwargs) -> SolanaRpcClient:
        def handle(request: httpx.Request) -> httpx.Response:
            payload = json.loads(request.content)
            rpc_requests.append(payload)
            body = handlers[payload["method"]](payload["params"])
            if isinstance(body, httpx.Response):
                return body
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], **body})

        kwargs.setdefault("poll_interval", 0)
        return SolanaRpcClient(
            rpc_url="http://fake-rpc:8899",
            transport=httpx.MockTransport(handle),
            **kwargs,
        )

    return build


@pytest.fixture
def recorded_sleep():
    """Async sleep replacement that records requested delays"""
    delays: List[float] = []

    async def sleep(seconds: float) -> None:
        delays.append(seconds)

    sleep.delays = delays
    return sleep


@pytest.fixture
def make_intent_json():
    return intent_json
