"""Shared pytest fixtures for generationproxy tests."""

import json

import pytest

from generationproxy.models.responses import GenerationResponse
from generationproxy.services.generation_service import GenerationService
from generationproxy.services.metrics_service import MetricsService


def text_response(text: str) -> GenerationResponse:
    """A well-formed single-candidate response carrying ``text``."""
    return GenerationResponse.from_payload({"candidates": [{"content": {"parts": [{"text": text}]}}]})


def json_response(data: dict) -> GenerationResponse:
    return text_response(json.dumps(data))


class ScriptedProvider:
    """Mock provider that plays back a script of responses and exceptions."""

    def __init__(self, *outcomes):
        """
        Initialize mock provider.

        Args:
            *outcomes: Played in order; the last one repeats once the script runs out
        """
        self.outcomes = list(outcomes)
        self.requests = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def generate_content(self, request):
        """Mock generate_content method."""
        self.requests.append(request)
        index = min(len(self.requests), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class SleepRecorder:
    """Stands in for asyncio.sleep; records requested delays in seconds."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleep_recorder():
    """Fixture for a backoff sleep that returns immediately."""
    return SleepRecorder()


@pytest.fixture
def metrics_service():
    return MetricsService()


@pytest.fixture
def make_service(sleep_recorder, metrics_service):
    """Factory for a GenerationService over a provider, with instant backoff."""

    def _make(provider, retry_policy=None):
        return GenerationService(
            provider,
            retry_policy=retry_policy,
            metrics_service=metrics_service,
            sleep=sleep_recorder,
        )

    return _make
