"""HTTP relay provider.

Forwards the request body unchanged to an intermediary endpoint that holds
the API key and talks to Gemini. Used where the backend is not directly
reachable.
"""

import logging

import httpx

from generationproxy.models.errors import ClassifiedError, ErrorKind
from generationproxy.models.requests import GenerationRequest
from generationproxy.models.responses import GenerationResponse
from generationproxy.utils.error_utils import error_from_status
from generationproxy.utils.sse_utils import aggregate_sse, is_event_stream

logger = logging.getLogger(__name__)


class RelayProvider:
    """Generation provider that POSTs {model, contents, config} to a relay."""

    def __init__(
        self,
        relay_url: str,
        timeout_seconds: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize relay provider.

        Args:
            relay_url: Full URL of the relay endpoint (e.g. https://host/api/gemini)
            timeout_seconds: Transport timeout for one attempt
            transport: Optional httpx transport (tests inject httpx.MockTransport)
        """
        if not relay_url:
            raise ValueError("relay_url is required")
        self.relay_url = relay_url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def generate_content(self, request: GenerationRequest) -> GenerationResponse:
        """POST one request to the relay and normalize its answer."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.post(self.relay_url, json=request.to_wire())
        except httpx.TimeoutException as e:
            raise ClassifiedError(
                ErrorKind.OVERLOADED,
                f"Relay request timed out after {self.timeout_seconds}s",
                original_exception=e,
            )
        except httpx.TransportError as e:
            raise ClassifiedError(
                ErrorKind.OVERLOADED,
                f"Relay unreachable: {e}",
                original_exception=e,
            )

        if not response.is_success:
            error = error_from_status(response.status_code, response.text, "Relay")
            logger.error(f"❌ [RelayProvider] {error.message}")
            raise error

        if is_event_stream(response.headers.get("content-type")):
            result = aggregate_sse(response.text.splitlines())
        else:
            try:
                payload = response.json()
            except ValueError as e:
                raise ClassifiedError(
                    ErrorKind.MALFORMED_RESPONSE,
                    "Relay returned a non-JSON body",
                    status_code=response.status_code,
                    original_exception=e,
                )
            if not isinstance(payload, dict):
                raise ClassifiedError(
                    ErrorKind.MALFORMED_RESPONSE,
                    "Relay returned an unexpected body shape",
                    status_code=response.status_code,
                )
            result = GenerationResponse.from_payload(payload)

        logger.debug(f"✅ [RelayProvider] {request.model}: {len(result.candidates)} candidates, {len(result.text)} chars")
        return result
