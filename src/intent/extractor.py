import logging

from langchain_core.exceptions import OutputParserException
from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import PydanticOutputParser

from src.agents.fixer import FixerAgent
from src.agents.intent import IntentAgent
from src.core.exceptions import IntentParseError
from src.wallet.models import Intent

logger = logging.getLogger(__name__)


class IntentExtractor:
    """Turns a free-text wallet query into an ``Intent``.

    Two stages: parse the extraction completion, and on failure run exactly one
    repair pass through the fixer agent and parse again. Nothing is kept between
    queries.
    """

    def __init__(self, llm: BaseChatModel):
        self.parser = PydanticOutputParser(pydantic_object=Intent)
        self.intent_agent = IntentAgent(llm)
        self.fixer_agent = FixerAgent(llm)

    @property
    def format_instructions(self) -> str:
        return self.parser.get_format_instructions()

    async def extract(self, query: str) -> Intent:
        raw = await self._call(
            self.intent_agent,
            query=query,
            format_instructions=self.format_instructions,
        )
        try:
            return self.parser.parse(raw)
        except OutputParserException as e:
            logger.warning("Intent output did not match schema, repairing: %s", e)
            error = str(e)

        fixed = await self._call(
            self.fixer_agent,
            completion=raw,
            error=error,
            format_instructions=self.format_instructions,
        )
        try:
            return self.parser.parse(fixed)
        except OutputParserException as e:
            logger.error("Repaired intent output still invalid: %s", e)
            raise IntentParseError(
                f"Could not parse intent from model output: {e}") from e

    async def _call(self, agent, **inputs) -> str:
        try:
            return await agent.act(**inputs)
        except Exception as e:
            logger.exception("Text completion call failed")
            raise IntentParseError(f"Text completion unavailable: {e}") from e
