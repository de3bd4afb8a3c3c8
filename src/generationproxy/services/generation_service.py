"""Generation service: retry, metrics and structured-output validation over a provider."""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, TypeVar, overload

from pydantic import BaseModel, ValidationError

from generationproxy.models.errors import ClassifiedError, ErrorKind
from generationproxy.models.metrics import GenerationMetrics
from generationproxy.models.requests import GenerationRequest
from generationproxy.models.responses import GenerationResponse
from generationproxy.providers.base import GenerationProvider
from generationproxy.services.metrics_service import MetricsService
from generationproxy.services.retry_service import RetryPolicy, retry_with_backoff
from generationproxy.utils.error_utils import classify_exception
from generationproxy.utils.json_utils import extract_json_text

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


@overload
def parse_structured_output(text: str, output_model: type[M]) -> M: ...


@overload
def parse_structured_output(text: str, output_model: None = None) -> Any: ...


def parse_structured_output(text, output_model=None):
    """
    Parse model text as JSON and validate it against ``output_model``.

    Raises:
        ClassifiedError: MALFORMED_RESPONSE for empty text, invalid JSON or
            a payload that does not match the model
    """
    if not text or not text.strip():
        raise ClassifiedError(ErrorKind.MALFORMED_RESPONSE, "No content generated")
    try:
        data = json.loads(extract_json_text(text))
    except json.JSONDecodeError as e:
        logger.error(f"❌ [GenerationService] JSON parse error. Raw response: {text[:500]}")
        raise ClassifiedError(
            ErrorKind.MALFORMED_RESPONSE,
            "AI returned invalid JSON",
            original_exception=e,
        )
    if output_model is None:
        return data
    try:
        return output_model.model_validate(data)
    except ValidationError as e:
        logger.error(f"❌ [GenerationService] Output failed {output_model.__name__} validation: {e}")
        raise ClassifiedError(
            ErrorKind.MALFORMED_RESPONSE,
            f"AI response did not match the expected {output_model.__name__} shape",
            original_exception=e,
        )


class GenerationService:
    """Runs generation requests through a provider with bounded retries."""

    def __init__(
        self,
        provider: GenerationProvider,
        retry_policy: RetryPolicy | None = None,
        metrics_service: MetricsService | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ):
        """
        Initialize generation service.

        Args:
            provider: Backend that performs one call per attempt
            retry_policy: Backoff policy (defaults to 3 retries, 1s, x2)
            metrics_service: Optional MetricsService for recording metrics
            sleep: Optional awaitable sleep for backoff (tests inject a recorder)
        """
        self.provider = provider
        self.retry_policy = retry_policy or RetryPolicy()
        self._metrics_service = metrics_service
        self._sleep = sleep

    async def generate(
        self,
        request: GenerationRequest,
        service_name: str | None = None,
    ) -> GenerationResponse:
        """
        Generate content with retry logic.

        Args:
            request: Generation request
            service_name: Optional feature name for logs and metrics

        Returns:
            The provider's normalized response

        Raises:
            Exception: The terminal failure, classified by the provider or as raised
        """
        start_time = time.time()
        attempts = 0

        async def _attempt() -> GenerationResponse:
            nonlocal attempts
            attempts += 1
            return await self.provider.generate_content(request)

        try:
            response = await retry_with_backoff(_attempt, policy=self.retry_policy, sleep=self._sleep)
        except Exception as e:
            kind = classify_exception(e)
            logger.error(
                f"❌ [GenerationService] {service_name or request.model} failed after "
                f"{attempts} attempt(s) with {kind.value}: {e}"
            )
            self._record(start_time, request, attempts, service_name, error_kind=kind)
            raise

        logger.info(
            f"✅ [GenerationService] {service_name or request.model} succeeded "
            f"on attempt {attempts} ({len(response.text)} chars)"
        )
        self._record(start_time, request, attempts, service_name, text_length=len(response.text))
        return response

    @overload
    async def generate_json(
        self, request: GenerationRequest, output_model: type[M], service_name: str | None = None
    ) -> M: ...

    @overload
    async def generate_json(
        self, request: GenerationRequest, output_model: None = None, service_name: str | None = None
    ) -> Any: ...

    async def generate_json(self, request, output_model=None, service_name=None):
        """Generate, then parse and validate the text as structured output (never retried)."""
        response = await self.generate(request, service_name=service_name)
        return parse_structured_output(response.text, output_model)

    def _record(
        self,
        start_time: float,
        request: GenerationRequest,
        attempts: int,
        service_name: str | None,
        error_kind: ErrorKind | None = None,
        text_length: int = 0,
    ) -> None:
        if not self._metrics_service:
            return
        metrics = GenerationMetrics(
            duration_ms=int((time.time() - start_time) * 1000),
            model_used=request.model,
            attempts=max(attempts, 1),
            success=error_kind is None,
            error_kind=error_kind,
            text_length=text_length,
            timestamp=datetime.now(timezone.utc),
        )
        self._metrics_service.record(metrics, service_name)
