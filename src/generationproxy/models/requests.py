"""Request models for generationproxy."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class GeminiModel(str, Enum):
    """Gemini models used by the products."""

    FLASH = "gemini-3-flash-preview"
    PRO = "gemini-3-pro-preview"
    FLASH_TTS = "gemini-2.5-flash-preview-tts"


DEFAULT_MODEL = GeminiModel.FLASH.value


class _WireModel(BaseModel):
    """Frozen model serialized with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class InlineData(_WireModel):
    """Base64-encoded binary payload with its MIME type."""

    mime_type: str = Field(..., min_length=1, description="MIME type, e.g. application/pdf")
    data: str = Field(..., description="Base64-encoded bytes")


class Part(_WireModel):
    """One piece of a conversation turn: inline text or inline binary data."""

    text: Optional[str] = Field(None, description="Inline text")
    inline_data: Optional[InlineData] = Field(None, description="Inline binary data")

    @model_validator(mode="after")
    def validate_single_payload(self):
        """Ensure exactly one payload is set."""
        if (self.text is None) == (self.inline_data is None):
            raise ValueError("part must carry exactly one of text or inline_data")
        return self

    @classmethod
    def from_text(cls, text: str) -> "Part":
        return cls(text=text)

    @classmethod
    def from_inline(cls, mime_type: str, data: str) -> "Part":
        return cls(inline_data=InlineData(mime_type=mime_type, data=data))


class Content(_WireModel):
    """A conversation turn."""

    role: str = Field("user", description="Turn author (user or model)")
    parts: list[Part] = Field(..., min_length=1, description="Ordered payload parts")


class GenerationConfig(_WireModel):
    """Generation options forwarded to the backend."""

    system_instruction: Optional[str] = Field(None, description="System prompt")
    response_mime_type: Optional[str] = Field(None, description="Typically application/json")
    response_schema: Optional[dict[str, Any]] = Field(
        None,
        description="Structural type descriptor constraining JSON output. Not validated by the proxy.",
    )
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0, description="Sampling temperature (0.0-2.0)")
    tools: Optional[list[dict[str, Any]]] = Field(None, description="Opaque tool declarations")
    response_modalities: Optional[list[str]] = Field(None, description="e.g. ['AUDIO'] for speech")
    speech_config: Optional[dict[str, Any]] = Field(None, description="Opaque voice configuration")

    @property
    def expects_json(self) -> bool:
        return self.response_mime_type == "application/json"


class GenerationRequest(_WireModel):
    """A normalized generation request. Immutable once built."""

    model: str = Field(DEFAULT_MODEL, min_length=1, description="Backend model identifier")
    contents: list[Content] = Field(..., min_length=1, description="Ordered conversation turns")
    config: Optional[GenerationConfig] = Field(None, description="Generation options")

    @classmethod
    def from_parts(
        cls,
        parts: list[Part],
        model: str | None = None,
        config: GenerationConfig | None = None,
    ) -> "GenerationRequest":
        """Build a single user-turn request."""
        return cls(
            model=model or DEFAULT_MODEL,
            contents=[Content(role="user", parts=parts)],
            config=config,
        )

    @property
    def expects_json(self) -> bool:
        return self.config is not None and self.config.expects_json

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the relay body: {model, contents, config}."""
        body = self.model_dump(by_alias=True, exclude_none=True)
        body.setdefault("config", {})
        return body
