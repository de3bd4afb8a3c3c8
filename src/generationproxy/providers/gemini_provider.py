"""Direct Gemini REST provider."""

import logging
from typing import Any

import httpx

from generationproxy.models.errors import ClassifiedError, ErrorKind, MissingCredentialError
from generationproxy.models.requests import GenerationRequest
from generationproxy.models.responses import GenerationResponse
from generationproxy.utils.error_utils import error_from_status
from generationproxy.utils.sse_utils import aggregate_sse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


def build_rest_body(request: GenerationRequest) -> dict[str, Any]:
    """
    Translate the wire request into a generateContent REST body.

    ``systemInstruction`` (a string on the wire) becomes a system content
    turn and ``tools`` moves to the top level; every other config key goes
    under ``generationConfig``.
    """
    wire = request.to_wire()
    config = dict(wire.get("config") or {})
    system_instruction = config.pop("systemInstruction", None)
    tools = config.pop("tools", None)

    body: dict[str, Any] = {"contents": wire["contents"]}
    if config:
        body["generationConfig"] = config
    if system_instruction:
        body["systemInstruction"] = {"role": "system", "parts": [{"text": system_instruction}]}
    if tools:
        body["tools"] = tools
    return body


class GeminiRestProvider:
    """Generation provider calling the Gemini REST API directly."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 60.0,
        stream: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the REST provider.

        Args:
            api_key: Gemini API key, threaded in from Settings at startup
            base_url: API root, overridable for compatible gateways
            timeout_seconds: Transport timeout for one attempt
            stream: Use streamGenerateContent (SSE) and aggregate the chunks
            transport: Optional httpx transport (tests inject httpx.MockTransport)
        """
        if not api_key:
            raise MissingCredentialError("Gemini API key is missing. Set GEMINI_API_KEY.")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.stream = stream
        self._transport = transport

    def endpoint_for(self, model: str) -> str:
        if self.stream:
            return f"{self.base_url}/v1beta/models/{model}:streamGenerateContent?alt=sse"
        return f"{self.base_url}/v1beta/models/{model}:generateContent"

    async def generate_content(self, request: GenerationRequest) -> GenerationResponse:
        """Call generateContent once and normalize the answer."""
        headers = {"x-goog-api-key": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint_for(request.model),
                    json=build_rest_body(request),
                    headers=headers,
                )
        except httpx.TimeoutException as e:
            raise ClassifiedError(
                ErrorKind.OVERLOADED,
                f"Gemini request timed out after {self.timeout_seconds}s",
                original_exception=e,
            )
        except httpx.TransportError as e:
            raise ClassifiedError(ErrorKind.OVERLOADED, f"Gemini unreachable: {e}", original_exception=e)

        if not response.is_success:
            error = error_from_status(response.status_code, response.text, "Gemini API")
            logger.error(f"❌ [GeminiRestProvider] {error.message}")
            raise error

        if self.stream:
            return aggregate_sse(response.text.splitlines())

        try:
            payload = response.json()
        except ValueError as e:
            raise ClassifiedError(
                ErrorKind.MALFORMED_RESPONSE,
                "Gemini API returned a non-JSON body",
                status_code=response.status_code,
                original_exception=e,
            )
        return GenerationResponse.from_payload(payload if isinstance(payload, dict) else {})
