"""Error kinds and the classified exception raised across the proxy boundary."""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories for generation calls."""

    # Transient (retried with backoff)
    OVERLOADED = "OVERLOADED"

    # Permanent (propagated immediately)
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    UNKNOWN = "UNKNOWN"


# Set of retryable error kinds
RETRYABLE_ERRORS = {
    ErrorKind.OVERLOADED,
}

USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.OVERLOADED: "The AI service is temporarily overloaded. Please try again in a moment.",
    ErrorKind.PAYLOAD_TOO_LARGE: (
        "The uploaded content is too large to process. Compress the file or use a smaller one."
    ),
    ErrorKind.UNAUTHORIZED: (
        "The API key was rejected. Check that GEMINI_API_KEY is configured correctly and redeploy."
    ),
    ErrorKind.FORBIDDEN: (
        "The API key lacks permission for this model. Check the key's restrictions in the "
        "Google Cloud console and the GEMINI_API_KEY configuration."
    ),
    ErrorKind.QUOTA_EXCEEDED: "The API quota has been reached. Wait a while or check your quota.",
    ErrorKind.MALFORMED_RESPONSE: "The AI returned an invalid response. Please try again.",
    ErrorKind.MISSING_CREDENTIAL: (
        "No API key is configured. Set GEMINI_API_KEY in the environment and restart the service."
    ),
    ErrorKind.UNKNOWN: "The request failed unexpectedly.",
}


def is_retryable(kind: ErrorKind) -> bool:
    """Check if an error kind indicates a transient failure."""
    return kind in RETRYABLE_ERRORS


def user_message_for(kind: ErrorKind) -> str:
    """Human-readable guidance for an error kind."""
    return USER_MESSAGES[kind]


class ClassifiedError(Exception):
    """A generation failure tagged with its ErrorKind."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status_code: int | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.original_exception = original_exception

    @property
    def retryable(self) -> bool:
        return is_retryable(self.kind)

    @property
    def user_message(self) -> str:
        return user_message_for(self.kind)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value}, {self.message!r})"


class MissingCredentialError(ClassifiedError):
    """Raised before any network call when no API key is configured."""

    def __init__(self, message: str = "API key is missing."):
        super().__init__(ErrorKind.MISSING_CREDENTIAL, message)


class FeatureError(ClassifiedError):
    """A terminal failure with user-facing context attached by a feature function."""
