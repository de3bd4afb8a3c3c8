"""Tests for settings and provider wiring."""

import pytest

from generationproxy.config import ProviderKind, Settings, build_provider, build_service
from generationproxy.models.errors import ErrorKind, MissingCredentialError
from generationproxy.providers.gemini_provider import GeminiRestProvider
from generationproxy.providers.genai_provider import GenAISDKProvider
from generationproxy.providers.relay_provider import RelayProvider
from generationproxy.services.generation_service import GenerationService


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from credentials present in the developer's shell."""
    for name in ("GEMINI_API_KEY", "GOOGLE_API_KEY", "GENERATIONPROXY_GEMINI_API_KEY", "GENERATIONPROXY_PROVIDER"):
        monkeypatch.delenv(name, raising=False)


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_defaults():
    settings = make_settings()

    assert settings.provider == ProviderKind.REST
    assert settings.gemini_api_key is None
    assert settings.timeout_seconds == 60.0
    policy = settings.retry_policy()
    assert (policy.max_retries, policy.initial_delay_ms, policy.backoff_multiplier) == (3, 1000, 2.0)


@pytest.mark.parametrize("variable", ["GEMINI_API_KEY", "GOOGLE_API_KEY", "GENERATIONPROXY_GEMINI_API_KEY"])
def test_api_key_from_environment(monkeypatch, variable):
    monkeypatch.setenv(variable, "env-key")

    assert make_settings().gemini_api_key == "env-key"


def test_prefixed_environment_overrides(monkeypatch):
    monkeypatch.setenv("GENERATIONPROXY_PROVIDER", "relay")
    monkeypatch.setenv("GENERATIONPROXY_MAX_RETRIES", "5")

    settings = make_settings()

    assert settings.provider == ProviderKind.RELAY
    assert settings.retry_policy().max_retries == 5


def test_rest_mode_without_key_fails_at_construction():
    with pytest.raises(MissingCredentialError) as exc_info:
        build_provider(make_settings())

    assert exc_info.value.kind == ErrorKind.MISSING_CREDENTIAL
    assert "GEMINI_API_KEY" in exc_info.value.user_message


def test_sdk_mode_without_key_fails_at_construction():
    with pytest.raises(MissingCredentialError):
        build_provider(make_settings(provider=ProviderKind.SDK))


def test_relay_mode_requires_url():
    with pytest.raises(ValueError, match="RELAY_URL"):
        build_provider(make_settings(provider=ProviderKind.RELAY))


def test_build_provider_per_kind():
    assert isinstance(
        build_provider(make_settings(provider=ProviderKind.RELAY, relay_url="https://relay.example/api/gemini")),
        RelayProvider,
    )
    assert isinstance(build_provider(make_settings(gemini_api_key="k")), GeminiRestProvider)
    assert isinstance(build_provider(make_settings(provider=ProviderKind.SDK, gemini_api_key="k")), GenAISDKProvider)


def test_build_service_uses_configured_policy():
    settings = make_settings(gemini_api_key="k", max_retries=1, initial_delay_ms=500)

    service = build_service(settings)

    assert isinstance(service, GenerationService)
    assert service.retry_policy.max_retries == 1
    assert service.retry_policy.initial_delay_ms == 500
