"""
Configuration module for the FDA Chat application.
Handles environment variables and application settings.
"""
import os
from dataclasses import dataclass, replace
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class LLMSettings:
    """
    Language model settings for a single request.
    Built from Config; never shared or mutated across requests.
    """
    provider: str
    api_key: str
    model: str
    base_url: Optional[str] = None
    temperature: float = 0.7
    max_tokens: Optional[int] = None

    def with_overrides(self, **changes) -> "LLMSettings":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


class Config:
    """Application configuration class."""

    # API Keys
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OLLAMA_API_KEY: str = os.getenv("OLLAMA_API_KEY", "")

    # Client API keys, "user_id:api_key" pairs separated by commas
    API_KEYS: str = os.getenv("API_KEYS", "")

    # Language model
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "openai").lower()
    LLM_BASE_URL: str = os.getenv("LLM_BASE_URL", "")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "gpt-4o-mini")
    OLLAMA_HOST: str = os.getenv("OLLAMA_HOST", "http://localhost:11434")

    # API Configuration
    FDA_LABEL_URL: str = "https://api.fda.gov/drug/label.json"
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Application Settings
    APP_TITLE: str = "FDA Chat"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    TITLE_LENGTH: int = 100
    DEFAULT_SEARCH_LIMIT: int = 20
    MAX_SEARCH_LIMIT: int = 1000

    # Token budget shared by the context and the answer
    MAX_TOKENS: int = 16000
    CONTEXT_PERCENTAGE: float = 0.2
    ANSWER_TOKEN_PERCENTAGE: float = 0.4
    ANSWER_TEMPERATURE: float = 0.7
    QUERY_TEMPERATURE: float = 0.0

    # Timeouts (in seconds)
    FDA_TIMEOUT: float = float(os.getenv("FDA_TIMEOUT", "15.0"))

    # Connection pool
    MAX_CONNECTIONS: int = 10

    @classmethod
    def parse_api_keys(cls, raw: str | None = None) -> dict[str, str]:
        """
        Parse the API_KEYS setting into an api_key -> user_id mapping.

        Args:
            raw: Setting value, defaults to Config.API_KEYS

        Returns:
            Mapping of API key to the user id it authenticates
        """
        raw = cls.API_KEYS if raw is None else raw
        keys = {}

        for pair in raw.split(","):
            user_id, sep, api_key = pair.strip().partition(":")
            if sep and user_id.strip() and api_key.strip():
                keys[api_key.strip()] = user_id.strip()

        return keys

    @classmethod
    def llm_settings(cls, preview_token: str | None = None) -> LLMSettings:
        """
        Build language model settings for one request.

        Args:
            preview_token: Optional API key supplied by the client for this request only

        Returns:
            LLMSettings for the configured provider
        """
        if cls.LLM_PROVIDER == "ollama":
            settings = LLMSettings(
                provider="ollama",
                api_key=cls.OLLAMA_API_KEY,
                model=cls.LLM_MODEL,
                base_url=cls.LLM_BASE_URL or cls.OLLAMA_HOST,
            )
        else:
            settings = LLMSettings(
                provider="openai",
                api_key=cls.OPENAI_API_KEY,
                model=cls.LLM_MODEL,
                base_url=cls.LLM_BASE_URL or None,
            )

        if preview_token:
            settings = settings.with_overrides(api_key=preview_token)

        return settings

    @classmethod
    def answer_max_tokens(cls) -> int:
        """Maximum tokens the streamed answer may use."""
        return int(cls.MAX_TOKENS * cls.ANSWER_TOKEN_PERCENTAGE)

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and print warnings for missing settings."""
        if cls.LLM_PROVIDER == "openai" and not cls.OPENAI_API_KEY:
            print("   WARNING: OPENAI_API_KEY not found in .env file")
            print("   Requests will fail unless the client sends a previewToken.")

        if cls.LLM_PROVIDER not in ("openai", "ollama"):
            print(f"   WARNING: Unknown LLM_PROVIDER '{cls.LLM_PROVIDER}', falling back to openai")

        if not cls.parse_api_keys():
            print("   WARNING: API_KEYS not found in .env file")
            print("   Every chat request will be rejected as Unauthorized.")


Config.validate()
