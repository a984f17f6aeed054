from abc import ABC, abstractmethod
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.runnables import Runnable


class BaseAgent(ABC):
    def __init__(self, llm: BaseChatModel):
        self.llm = llm
        self.chain = self._build_chain()

    @abstractmethod
    def _build_chain(self) -> Runnable:
        pass

    async def act(self, **inputs: Any) -> str:
        return await self.chain.ainvoke(inputs)
