"""Models package for generationproxy."""

from generationproxy.models.errors import (
    ClassifiedError,
    ErrorKind,
    FeatureError,
    MissingCredentialError,
    is_retryable,
    user_message_for,
)
from generationproxy.models.metrics import GenerationMetrics
from generationproxy.models.requests import (
    DEFAULT_MODEL,
    Content,
    GeminiModel,
    GenerationConfig,
    GenerationRequest,
    InlineData,
    Part,
)
from generationproxy.models.responses import Candidate, GenerationResponse

__all__ = [
    "ClassifiedError",
    "ErrorKind",
    "FeatureError",
    "MissingCredentialError",
    "is_retryable",
    "user_message_for",
    "GenerationMetrics",
    "DEFAULT_MODEL",
    "Content",
    "GeminiModel",
    "GenerationConfig",
    "GenerationRequest",
    "InlineData",
    "Part",
    "Candidate",
    "GenerationResponse",
]
