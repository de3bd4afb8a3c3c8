"""Response models for generationproxy."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from generationproxy.models.errors import ClassifiedError, ErrorKind
from generationproxy.models.requests import InlineData


class _ProviderModel(BaseModel):
    """Lenient model for provider payloads: camelCase keys, unknown keys kept."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class ResponsePart(_ProviderModel):
    text: Optional[str] = None
    inline_data: Optional[InlineData] = None


class CandidateContent(_ProviderModel):
    role: Optional[str] = None
    parts: list[ResponsePart] = Field(default_factory=list)

    @field_validator("parts", mode="before")
    @classmethod
    def drop_null_parts(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [part for part in value if part is not None]
        return value


class Candidate(_ProviderModel):
    """One alternative generation returned by the backend."""

    content: Optional[CandidateContent] = None
    finish_reason: Optional[str] = None
    grounding_metadata: Optional[dict[str, Any]] = None


class GenerationResponse(_ProviderModel):
    """Normalized backend response.

    ``text`` flattens the first candidate's first part for convenience. It is
    ``""`` when any link of that chain is missing; callers treat empty text
    as a failure.
    """

    candidates: list[Candidate] = Field(default_factory=list)
    text: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any] | None, text: str | None = None) -> "GenerationResponse":
        """
        Build from a provider dict, deriving ``text`` unless given.

        Null candidates and null parts count as absent. Any other shape the
        models reject raises MALFORMED_RESPONSE.
        """
        payload = dict(payload or {})
        payload.pop("text", None)
        candidates = payload.pop("candidates", None) or []
        if isinstance(candidates, list):
            candidates = [candidate for candidate in candidates if candidate is not None]
        try:
            response = cls(candidates=candidates, **payload)
        except ValidationError as e:
            raise ClassifiedError(
                ErrorKind.MALFORMED_RESPONSE,
                f"Unexpected response shape: {e.error_count()} validation error(s)",
                original_exception=e,
            )
        response.text = flatten_text(response.candidates) if text is None else text
        return response

    def first_inline_data(self) -> InlineData | None:
        """Inline data of the first candidate's first part, if any."""
        part = _first_part(self.candidates)
        return part.inline_data if part is not None else None

    def grounding_sources(self) -> list[dict[str, str]]:
        """Web sources cited by the first candidate (search grounding)."""
        if not self.candidates or not self.candidates[0].grounding_metadata:
            return []
        chunks = self.candidates[0].grounding_metadata.get("groundingChunks") or []
        sources = []
        for chunk in chunks:
            web = chunk.get("web") or {}
            if web.get("uri"):
                sources.append({"uri": web["uri"], "title": web.get("title") or web["uri"]})
        return sources


def _first_part(candidates: list[Candidate]) -> ResponsePart | None:
    if not candidates:
        return None
    content = candidates[0].content
    if content is None or not content.parts:
        return None
    return content.parts[0]


def flatten_text(candidates: list[Candidate]) -> str:
    """First candidate -> first part -> text, or "" when absent."""
    part = _first_part(candidates)
    if part is None or part.text is None:
        return ""
    return part.text
