"""Configuration management for generationproxy.

Settings are read once at startup; the credential is then passed explicitly
into the provider so the call path never touches the environment.
"""

from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from generationproxy.providers.base import GenerationProvider
from generationproxy.providers.gemini_provider import DEFAULT_BASE_URL, GeminiRestProvider
from generationproxy.providers.genai_provider import GenAISDKProvider
from generationproxy.providers.relay_provider import RelayProvider
from generationproxy.services.generation_service import GenerationService
from generationproxy.services.metrics_service import MetricsService
from generationproxy.services.retry_service import RetryPolicy


class ProviderKind(str, Enum):
    """Which backend services generation calls."""

    RELAY = "relay"
    REST = "rest"
    SDK = "sdk"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GENERATIONPROXY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Credential
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GENERATIONPROXY_GEMINI_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY"),
        description="Gemini API key (not needed in relay mode)",
    )

    # Backend selection
    provider: ProviderKind = Field(default=ProviderKind.REST, description="relay, rest or sdk")
    relay_url: str | None = Field(default=None, description="Relay endpoint URL (relay mode)")
    gemini_base_url: str = Field(default=DEFAULT_BASE_URL, description="Gemini REST API root")
    stream: bool = Field(default=False, description="Use streamGenerateContent in rest mode")

    # Timeout Configuration
    timeout_seconds: float = Field(default=60.0, gt=0, description="Transport timeout per attempt")

    # Retry Configuration
    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    initial_delay_ms: int = Field(default=1000, gt=0, description="Delay before the first retry")
    backoff_multiplier: float = Field(default=2.0, gt=1.0, description="Delay growth factor")

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            initial_delay_ms=self.initial_delay_ms,
            backoff_multiplier=self.backoff_multiplier,
        )


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    return Settings()


def build_provider(settings: Settings) -> GenerationProvider:
    """
    Create the provider selected by settings.

    Raises:
        MissingCredentialError: rest/sdk mode without an API key
        ValueError: relay mode without a relay URL
    """
    if settings.provider == ProviderKind.RELAY:
        if not settings.relay_url:
            raise ValueError("GENERATIONPROXY_RELAY_URL is required in relay mode")
        return RelayProvider(settings.relay_url, timeout_seconds=settings.timeout_seconds)
    if settings.provider == ProviderKind.SDK:
        return GenAISDKProvider(settings.gemini_api_key)
    return GeminiRestProvider(
        settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        timeout_seconds=settings.timeout_seconds,
        stream=settings.stream,
    )


def build_service(settings: Settings | None = None, metrics_service: MetricsService | None = None) -> GenerationService:
    """Wire provider, retry policy and metrics into a GenerationService."""
    settings = settings or get_settings()
    return GenerationService(
        build_provider(settings),
        retry_policy=settings.retry_policy(),
        metrics_service=metrics_service,
    )
