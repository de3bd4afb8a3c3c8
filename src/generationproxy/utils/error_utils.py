"""Classification of transport failures into ErrorKind.

The status code is the primary signal. Message substrings are only a
best-effort refinement for failures that carry no decisive status (SDK
exceptions, relay error bodies, plain exceptions). Anything unmatched is
UNKNOWN.
"""

import json
import logging

from generationproxy.models.errors import ClassifiedError, ErrorKind, FeatureError

logger = logging.getLogger(__name__)


STATUS_KINDS: dict[int, ErrorKind] = {
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.FORBIDDEN,
    413: ErrorKind.PAYLOAD_TOO_LARGE,
    429: ErrorKind.QUOTA_EXCEEDED,
    500: ErrorKind.OVERLOADED,
    503: ErrorKind.OVERLOADED,
}

# Checked in order; first match wins.
MESSAGE_KINDS: list[tuple[str, ErrorKind]] = [
    ("payload too large", ErrorKind.PAYLOAD_TOO_LARGE),
    ("too large", ErrorKind.PAYLOAD_TOO_LARGE),
    ("unauthorized", ErrorKind.UNAUTHORIZED),
    ("api key not valid", ErrorKind.UNAUTHORIZED),
    ("forbidden", ErrorKind.FORBIDDEN),
    ("quota", ErrorKind.QUOTA_EXCEEDED),
    ("overloaded", ErrorKind.OVERLOADED),
    ("rpc failed", ErrorKind.OVERLOADED),
    ("deadline", ErrorKind.OVERLOADED),
    ("unavailable", ErrorKind.OVERLOADED),
    ("api key is missing", ErrorKind.MISSING_CREDENTIAL),
    ("missing api key", ErrorKind.MISSING_CREDENTIAL),
]

# Message kinds that override a server-error status.
CREDENTIAL_KINDS = {ErrorKind.UNAUTHORIZED, ErrorKind.MISSING_CREDENTIAL}


def classify_message(message: str | None) -> ErrorKind:
    """Classify by case-insensitive substring match."""
    if not message:
        return ErrorKind.UNKNOWN
    lowered = message.lower()
    for needle, kind in MESSAGE_KINDS:
        if needle in lowered:
            return kind
    return ErrorKind.UNKNOWN


def classify_status(status_code: int | None, message: str | None = None) -> ErrorKind:
    """
    Classify by status code, falling back to the message.

    A relay with no server-side key answers 500, so on a server-error status
    a credential message still wins over OVERLOADED.
    """
    if status_code in STATUS_KINDS:
        kind = STATUS_KINDS[status_code]
        if kind == ErrorKind.OVERLOADED:
            message_kind = classify_message(message)
            if message_kind in CREDENTIAL_KINDS:
                return message_kind
        return kind
    return classify_message(message)


def _status_of(exc: BaseException) -> int | None:
    # httpx.HTTPStatusError carries the status on its response
    response = getattr(exc, "response", None)
    status = getattr(response, "status_code", None)
    if isinstance(status, int):
        return status
    # google-genai APIError uses .code; others use .status_code or .status
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def classify_exception(exc: BaseException) -> ErrorKind:
    """Classify any exception raised by a provider call."""
    if isinstance(exc, ClassifiedError):
        return exc.kind
    return classify_status(_status_of(exc), str(exc))


def to_classified(exc: Exception, context: str = "Generation request failed") -> ClassifiedError:
    """Wrap an exception in a ClassifiedError, keeping the original."""
    if isinstance(exc, ClassifiedError):
        return exc
    return ClassifiedError(
        classify_exception(exc),
        f"{context}: {exc}",
        status_code=_status_of(exc),
        original_exception=exc,
    )


def extract_error_message(body_text: str | None) -> str | None:
    """Pull a message out of an error body: JSON ``error``/``message``, else raw text."""
    if not body_text:
        return None
    try:
        data = json.loads(body_text)
    except json.JSONDecodeError:
        return body_text.strip() or None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            error = error.get("message")
        if isinstance(error, str) and error:
            return error
        message = data.get("message")
        if isinstance(message, str) and message:
            return message
    return body_text.strip() or None


def error_from_status(status_code: int, body_text: str | None, source: str) -> ClassifiedError:
    """Build the ClassifiedError for a non-success transport response."""
    detail = extract_error_message(body_text) or f"HTTP {status_code}"
    kind = classify_status(status_code, detail)
    logger.debug(f"[ErrorUtils] {source} HTTP {status_code} classified as {kind.value}")
    return ClassifiedError(kind, f"{source} error ({status_code}): {detail}", status_code=status_code)


def feature_error(action: str, exc: Exception) -> FeatureError:
    """Attach user-facing context ("Failed to <action>") without changing the kind."""
    classified = to_classified(exc)
    return FeatureError(
        classified.kind,
        f"Failed to {action}. {classified.user_message}",
        status_code=classified.status_code,
        original_exception=exc,
    )
