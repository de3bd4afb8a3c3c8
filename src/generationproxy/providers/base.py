"""Base provider interface for content generation."""

from typing import Protocol

from typing_extensions import runtime_checkable

from generationproxy.models.requests import GenerationRequest
from generationproxy.models.responses import GenerationResponse


@runtime_checkable
class GenerationProvider(Protocol):
    """Protocol for backends that service a GenerationRequest."""

    async def generate_content(self, request: GenerationRequest) -> GenerationResponse:
        """
        Perform exactly one backend call for the request.

        Args:
            request: Normalized generation request

        Returns:
            Normalized response; ``text`` is "" when the backend sent none

        Raises:
            ClassifiedError: For non-success transport responses
        """
        ...
