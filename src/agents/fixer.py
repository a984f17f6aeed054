from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from src.agents.base import BaseAgent
from src.core.prompts import FIXER_PROMPT


class FixerAgent(BaseAgent):
    """Resubmits a malformed completion together with the parse error."""

    def _build_chain(self):
        prompt = ChatPromptTemplate.from_template(FIXER_PROMPT)
        return prompt | self.llm | StrOutputParser()
