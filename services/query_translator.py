"""
Query translation service.
Turns the user's question into a validated openFDA structured search.
"""
import json
import re
from pydantic import ValidationError

from config import Config
from models.chat_models import ChatContext, StructuredSearch
from utils.constants import FDA_QUERY_PROMPT, Patterns
from utils.errors import QueryTranslationError
from utils.logger import app_logger

_CODE_FENCE = re.compile(r'^\s*```(?:json)?\s*|\s*```\s*$', re.IGNORECASE)


def strip_json_label(text: str) -> str:
    """Remove the "JSON: " label and code fences models put around the object."""
    text = _CODE_FENCE.sub('', text)
    return re.sub(Patterns.JSON_LABEL, '', text).strip()


def parse_structured_search(text: str) -> StructuredSearch:
    """
    Parse raw model output into a StructuredSearch.

    Raises:
        QueryTranslationError: If the output is not JSON or not a valid search
    """
    cleaned = strip_json_label(text)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise QueryTranslationError(f"Model output is not JSON: {e}", raw_output=text) from e

    try:
        return StructuredSearch.from_model_output(data)
    except (ValidationError, ValueError) as e:
        raise QueryTranslationError(f"Invalid structured search: {e}", raw_output=text) from e


class QueryTranslator:
    """Translates questions into openFDA structured searches."""

    @staticmethod
    def build_messages(question: str) -> list[dict]:
        """Prompt messages for a question."""
        return [
            {"role": "system", "content": FDA_QUERY_PROMPT},
            {"role": "user", "content": question}
        ]

    @staticmethod
    async def translate(context: ChatContext) -> StructuredSearch:
        """
        Ask the model for a structured search matching the latest question.

        Args:
            context: ChatContext of the current request

        Returns:
            Validated StructuredSearch
        """
        call_num = context.next_call_number()
        app_logger.info(f"LLM Call #{call_num}: Translating question into FDA query")

        raw = await context.llm.complete(
            QueryTranslator.build_messages(context.question),
            temperature=Config.QUERY_TEMPERATURE,
            json_mode=True
        )
        app_logger.info(f"LLM Call #{call_num} response: {raw}")

        try:
            search = parse_structured_search(raw)
        except QueryTranslationError as e:
            app_logger.error(f"FDA query translation failed: {e}")
            raise

        app_logger.info(f"FDA query: {search.model_dump(mode='json')}")
        return search
