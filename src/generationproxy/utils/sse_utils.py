"""Aggregation of Gemini server-sent event streams into one response."""

import json
import logging
from typing import Any, Iterable

from generationproxy.models.errors import ClassifiedError
from generationproxy.models.responses import GenerationResponse, flatten_text

logger = logging.getLogger(__name__)

SSE_CONTENT_TYPE = "text/event-stream"


def is_event_stream(content_type: str | None) -> bool:
    return bool(content_type) and SSE_CONTENT_TYPE in content_type


def aggregate_sse(lines: Iterable[str]) -> GenerationResponse:
    """
    Fold ``data:`` chunks of a streamGenerateContent stream into one response.

    Text chunks are concatenated in order; the candidates of the last chunk
    that carried any are kept (they hold the final grounding metadata).
    Undecodable or malformed chunks are skipped.
    """
    text_chunks: list[str] = []
    last_payload: dict[str, Any] = {}
    for line in lines:
        if not line.startswith("data:"):
            continue
        data = line[len("data:"):].strip()
        if not data or data == "[DONE]":
            continue
        try:
            chunk = json.loads(data)
        except json.JSONDecodeError as e:
            logger.warning(f"⚠️ [SSE] Skipping undecodable chunk: {e}")
            continue
        if not isinstance(chunk, dict):
            continue
        if chunk.get("candidates"):
            try:
                partial = GenerationResponse.from_payload(chunk)
            except ClassifiedError as e:
                logger.warning(f"⚠️ [SSE] Skipping malformed chunk: {e.message}")
                continue
            text_chunks.append(flatten_text(partial.candidates))
            last_payload = chunk
    return GenerationResponse.from_payload(last_payload, text="".join(text_chunks))
