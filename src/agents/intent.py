from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from src.agents.base import BaseAgent
from src.core.prompts import INTENT_PROMPT


class IntentAgent(BaseAgent):
    """Asks the LLM to describe a wallet query as the Intent fields."""

    def _build_chain(self):
        prompt = ChatPromptTemplate.from_template(INTENT_PROMPT)
        return prompt | self.llm | StrOutputParser()
