"""
Language model providers.
Wraps the hosted OpenAI API and Ollama behind the two calls the chat flow needs.
"""
from typing import AsyncIterator, Protocol
import ollama
from openai import AsyncOpenAI

from config import LLMSettings
from utils.logger import app_logger


class LLMProvider(Protocol):
    """Chat completion capability used by the chat flow."""

    settings: LLMSettings

    async def complete(self, messages: list[dict], temperature: float | None = None, json_mode: bool = False) -> str:
        ...

    def stream(self, messages: list[dict], temperature: float | None = None, max_tokens: int | None = None) -> AsyncIterator[str]:
        """
        Answer text deltas.

        Implemented as an async generator: calling it returns the iterator
        directly, without an await.
        """
        ...

class OpenAIProvider:
    """Chat completions through the OpenAI API (or an OpenAI-compatible base URL)."""

    def __init__(self, settings: LLMSettings, client: AsyncOpenAI | None = None):
        self.settings = settings
        self.client = client or AsyncOpenAI(
            api_key=settings.api_key or None,
            base_url=settings.base_url or None,
        )

    async def complete(self, messages: list[dict], temperature: float | None = None, json_mode: bool = False) -> str:
        """Return the full completion text."""
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self.client.chat.completions.create(
            model=self.settings.model,
            messages=messages,
            temperature=self.settings.temperature if temperature is None else temperature,
            **kwargs
        )
        return response.choices[0].message.content or ""

    async def stream(self, messages: list[dict], temperature: float | None = None, max_tokens: int | None = None) -> AsyncIterator[str]:
        """Yield completion text deltas as they arrive."""
        stream = await self.client.chat.completions.create(
            model=self.settings.model,
            messages=messages,
            temperature=self.settings.temperature if temperature is None else temperature,
            max_tokens=max_tokens or self.settings.max_tokens,
            stream=True
        )

        async for chunk in stream:
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content


class OllamaProvider:
    """Chat completions through an Ollama server, local or hosted."""

    def __init__(self, settings: LLMSettings, client: ollama.AsyncClient | None = None):
        self.settings = settings
        if client is None:
            headers = {"Authorization": f"Bearer {settings.api_key}"} if settings.api_key else None
            client = ollama.AsyncClient(host=settings.base_url, headers=headers)
        self.client = client

    def _options(self, temperature: float | None, max_tokens: int | None = None) -> dict:
        options = {"temperature": self.settings.temperature if temperature is None else temperature}
        if max_tokens or self.settings.max_tokens:
            options["num_predict"] = max_tokens or self.settings.max_tokens
        return options

    async def complete(self, messages: list[dict], temperature: float | None = None, json_mode: bool = False) -> str:
        """Return the full completion text."""
        kwargs = {"format": "json"} if json_mode else {}
        response = await self.client.chat(
            model=self.settings.model,
            messages=messages,
            options=self._options(temperature),
            **kwargs
        )
        return response['message']['content']

    async def stream(self, messages: list[dict], temperature: float | None = None, max_tokens: int | None = None) -> AsyncIterator[str]:
        """Yield completion text deltas as they arrive."""
        llm_stream = await self.client.chat(
            model=self.settings.model,
            messages=messages,
            options=self._options(temperature, max_tokens),
            stream=True
        )

        async for chunk in llm_stream:
            token = chunk['message']['content']
            if token:
                yield token


def get_llm_provider(settings: LLMSettings) -> LLMProvider:
    """Create the provider named by the settings."""
    if settings.provider == "ollama":
        app_logger.debug(f"Using Ollama provider at {settings.base_url} ({settings.model})")
        return OllamaProvider(settings)

    app_logger.debug(f"Using OpenAI provider ({settings.model})")
    return OpenAIProvider(settings)
