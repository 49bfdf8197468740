"""
Token management utilities for context window handling.
Provides token estimation and context truncation.
"""
import math
import re
from utils.logger import app_logger
from utils.constants import Patterns
from config import Config


class TokenManager:
    """Manages token estimation and truncation of fetched context."""

    # Token budget shared by the prompt context and the answer
    MAX_TOKENS = Config.MAX_TOKENS

    @staticmethod
    def estimate_tokens(text: str) -> int:
        """Estimate token count by splitting on whitespace and common punctuation."""
        if not text:
            return 0

        return sum(1 for token in re.split(Patterns.TOKEN_SPLIT, text) if token)

    @staticmethod
    def calculate_messages_tokens(messages: list[dict]) -> int:
        """Calculate total tokens for a list of messages."""
        total_tokens = 0

        for msg in messages:
            content = msg.get('content', '')
            total_tokens += TokenManager.estimate_tokens(content)
            total_tokens += 4

        return total_tokens

    @staticmethod
    def context_budget(percentage: float) -> int:
        """Number of tokens the context may use at the given share of MAX_TOKENS."""
        return math.floor(TokenManager.MAX_TOKENS * percentage)

    @staticmethod
    def truncate_context(context_data: str, percentage: float = 0.5) -> str:
        """
        Truncate fetched context to a share of the token budget.

        The estimate counts punctuation as separators, but truncation keeps
        whole words: when over budget the first `budget` words are kept.

        Args:
            context_data: Text to insert into the answer prompt
            percentage: Share of MAX_TOKENS the context may use

        Returns:
            The text unchanged when within budget, otherwise its first words
        """
        max_tokens = TokenManager.context_budget(percentage)
        tokens = TokenManager.estimate_tokens(context_data)

        if tokens <= max_tokens:
            return context_data

        words = context_data.split()
        truncated = " ".join(words[:max_tokens])

        app_logger.info(
            f"Truncated context: {tokens} estimated tokens over budget {max_tokens}, "
            f"kept {min(len(words), max_tokens)}/{len(words)} words"
        )

        return truncated
