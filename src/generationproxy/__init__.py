"""generationproxy - resilient Gemini invocation for form-to-LLM products."""

from generationproxy.config import ProviderKind, Settings, build_provider, build_service, get_settings
from generationproxy.models.errors import ClassifiedError, ErrorKind, FeatureError, is_retryable
from generationproxy.models.metrics import GenerationMetrics
from generationproxy.models.requests import (
    Content,
    GeminiModel,
    GenerationConfig,
    GenerationRequest,
    InlineData,
    Part,
)
from generationproxy.models.responses import GenerationResponse
from generationproxy.providers.base import GenerationProvider
from generationproxy.providers.gemini_provider import GeminiRestProvider
from generationproxy.providers.genai_provider import GenAISDKProvider
from generationproxy.providers.relay_provider import RelayProvider
from generationproxy.services.generation_service import GenerationService, parse_structured_output
from generationproxy.services.metrics_service import MetricsService
from generationproxy.services.retry_service import RetryPolicy, retry_with_backoff
from generationproxy.utils.error_utils import classify_exception, classify_status
from generationproxy.utils.schema_utils import schema_for, to_gemini_schema

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "ProviderKind",
    "Settings",
    "build_provider",
    "build_service",
    "get_settings",
    # Request/Response types
    "Content",
    "GeminiModel",
    "GenerationConfig",
    "GenerationRequest",
    "GenerationResponse",
    "InlineData",
    "Part",
    # Errors
    "ClassifiedError",
    "ErrorKind",
    "FeatureError",
    "is_retryable",
    "classify_exception",
    "classify_status",
    # Providers
    "GenerationProvider",
    "GeminiRestProvider",
    "GenAISDKProvider",
    "RelayProvider",
    # Services
    "GenerationService",
    "GenerationMetrics",
    "MetricsService",
    "RetryPolicy",
    "retry_with_backoff",
    "parse_structured_output",
    # Utilities
    "schema_for",
    "to_gemini_schema",
]
