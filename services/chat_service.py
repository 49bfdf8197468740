"""
Chat service containing core chat processing logic.
Translates the question, fetches label data and assembles the answer prompt.
"""
from models.chat_models import ChatContext
from services.fda_client import FDAApi
from services.query_translator import QueryTranslator
from utils.constants import SUMMARY_SYSTEM_PROMPT, QUESTION_TEMPLATE
from config import Config
from utils.logger import app_logger
from utils.token_manager import TokenManager


class ChatService:
    """Service for handling chat logic."""

    @staticmethod
    def build_answer_messages(messages: list[dict], context_data: str) -> list[dict]:
        """
        Assemble the messages for the answer call.

        The latest question moves to the end, after the report instruction and
        the fetched label data.

        Args:
            messages: Conversation as sent by the client
            context_data: Truncated label data

        Returns:
            New message list; the input list is left untouched
        """
        history = list(messages)
        last_message = history.pop()

        return [
            *history,
            {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
            {"role": "user", "content": context_data},
            {"role": "user", "content": QUESTION_TEMPLATE.format(question=last_message["content"])}
        ]

    @staticmethod
    async def prepare_answer(context: ChatContext, fda_api: FDAApi | None = None) -> list[dict]:
        """
        Run the steps before streaming: translate, fetch, truncate, assemble.

        Args:
            context: ChatContext of the current request
            fda_api: openFDA client, a default one when omitted

        Returns:
            Messages for the streamed answer
        """
        search = await QueryTranslator.translate(context)

        fda_api = fda_api or FDAApi()
        fda_result = await fda_api.fetch(search)

        context_data = TokenManager.truncate_context(fda_result, Config.CONTEXT_PERCENTAGE)

        messages = ChatService.build_answer_messages(context.messages, context_data)
        app_logger.debug(
            f"Answer prompt: {len(messages)} messages, "
            f"~{TokenManager.calculate_messages_tokens(messages)} tokens"
        )
        return messages
