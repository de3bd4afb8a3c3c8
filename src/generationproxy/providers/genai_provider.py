"""Direct Gemini provider backed by the google-genai SDK."""

import logging
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors

from generationproxy.models.errors import ClassifiedError, ErrorKind, MissingCredentialError
from generationproxy.models.requests import GenerationRequest
from generationproxy.models.responses import GenerationResponse
from generationproxy.utils.error_utils import classify_status

logger = logging.getLogger(__name__)


class GenAISDKProvider:
    """Generation provider using ``client.aio.models.generate_content``."""

    def __init__(self, api_key: str | None, client: Any | None = None):
        """
        Initialize the SDK provider.

        Args:
            api_key: Gemini API key, threaded in from Settings at startup
            client: Optional pre-built genai.Client (tests inject a mock)
        """
        if not api_key:
            raise MissingCredentialError("Gemini API key is missing. Set GEMINI_API_KEY.")
        self.client = client or genai.Client(api_key=api_key)

    async def generate_content(self, request: GenerationRequest) -> GenerationResponse:
        """Call the SDK once and normalize its response object."""
        contents = request.model_dump(by_alias=True, exclude_none=True)["contents"]
        config = request.config.model_dump(exclude_none=True) if request.config else None

        try:
            response = await self.client.aio.models.generate_content(
                model=request.model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as e:
            kind = classify_status(e.code, e.message)
            logger.error(f"❌ [GenAISDKProvider] {request.model} failed with {e.code}: {e.message}")
            raise ClassifiedError(
                kind,
                f"Gemini SDK error ({e.code}): {e.message}",
                status_code=e.code,
                original_exception=e,
            )
        except httpx.TimeoutException as e:
            raise ClassifiedError(
                ErrorKind.OVERLOADED,
                f"Gemini SDK request timed out: {e}",
                original_exception=e,
            )
        except httpx.TransportError as e:
            raise ClassifiedError(ErrorKind.OVERLOADED, f"Gemini unreachable: {e}", original_exception=e)

        payload = response.model_dump(mode="json", by_alias=True, exclude_none=True)
        return GenerationResponse.from_payload(payload)
