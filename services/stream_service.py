"""
Streaming service containing core streaming logic.
Relays answer tokens to the client and persists the chat once the answer is complete.
"""
from typing import AsyncIterator, Optional
from config import Config
from models.chat_models import ChatContext
from services.chat_store import ChatStore
from utils.errors import AnswerStreamError, FDAChatError
from utils.logger import app_logger


class StreamService:
    """Service for handling streaming chat operations."""

    @staticmethod
    async def stream_answer(
        context: ChatContext,
        messages: list[dict],
        store: Optional[ChatStore] = None
    ) -> AsyncIterator[str]:
        """
        Stream the answer and persist the chat when the stream completes.

        Tokens are yielded unmodified. Persistence runs only after the upstream
        stream is exhausted; a client disconnect closes this generator first.

        Args:
            context: ChatContext of the current request
            messages: Assembled answer messages
            store: Chat store, the shared one when omitted

        Yields:
            Answer text deltas
        """
        call_num = context.next_call_number()
        app_logger.info(f"LLM Call #{call_num}: Streaming answer")

        completion = ""
        async for token in context.llm.stream(
            messages,
            temperature=Config.ANSWER_TEMPERATURE,
            max_tokens=Config.answer_max_tokens()
        ):
            completion += token
            yield token

        app_logger.info(f"LLM Call #{call_num} completed: Generated {len(completion)} characters")

        store = store or ChatStore()
        await store.save_chat(
            user_id=context.user_id,
            title_source=context.request.messages[0].content,
            messages=messages,
            completion=completion,
            chat_id=context.chat_id
        )

    @staticmethod
    async def start_answer(
        context: ChatContext,
        messages: list[dict],
        store: Optional[ChatStore] = None
    ) -> AsyncIterator[str]:
        """
        Open the answer stream and wait for its first token.

        Failures of the answer call surface here, before any response is sent.

        Returns:
            Async iterator relaying the first token and the rest of the stream

        Raises:
            AnswerStreamError: When the model fails before producing a token
        """
        stream = StreamService.stream_answer(context, messages, store=store)
        try:
            first_token = await stream.__anext__()
        except StopAsyncIteration:
            first_token = None
        except FDAChatError:
            raise
        except Exception as e:
            app_logger.error(f"Answer stream failed to start: {e!r}")
            raise AnswerStreamError(f"Answer stream failed to start: {e}") from e

        return StreamService._relay(first_token, stream)

    @staticmethod
    async def _relay(first_token: Optional[str], stream: AsyncIterator[str]) -> AsyncIterator[str]:
        try:
            if first_token is not None:
                yield first_token
            async for token in stream:
                yield token
        finally:
            await stream.aclose()
