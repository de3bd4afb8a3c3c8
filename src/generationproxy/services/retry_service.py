"""Retry service with exponential backoff for generation calls."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from generationproxy.models.errors import ErrorKind, is_retryable
from generationproxy.utils.error_utils import classify_exception

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """Bounded exponential backoff: 3 retries at 1s, 2s, 4s by default."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(3, ge=0, description="Retries after the first attempt")
    initial_delay_ms: int = Field(1000, gt=0, description="Delay before the first retry")
    backoff_multiplier: float = Field(2.0, gt=1.0, description="Delay growth factor per retry")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_ms(self, retry_number: int) -> float:
        """Delay before retry ``retry_number`` (1-based)."""
        return self.initial_delay_ms * self.backoff_multiplier ** (retry_number - 1)

    def to_tenacity(self) -> dict[str, Any]:
        """Tenacity stop/wait configuration for this policy (no jitter, no cap)."""
        return {
            "stop": stop_after_attempt(self.max_attempts),
            "wait": wait_exponential(
                multiplier=self.initial_delay_ms / 1000.0,
                exp_base=self.backoff_multiplier,
            ),
            "reraise": True,
        }


DEFAULT_RETRY_POLICY = RetryPolicy()


def _is_transient(exc: BaseException) -> bool:
    return is_retryable(classify_exception(exc))


def _log_backoff(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning(
        f"⏳ [RetryService] Transient failure on attempt {retry_state.attempt_number} "
        f"({type(exc).__name__}: {exc}), retrying in {int(delay * 1000)}ms"
    )


async def retry_with_backoff(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[None]] | None = None,
    **kwargs: Any,
) -> T:
    """
    Execute an async function with retry logic and exponential backoff.

    Args:
        func: Async function to execute
        *args: Positional arguments for func
        policy: Retry policy. If None, uses DEFAULT_RETRY_POLICY.
        sleep: Awaitable sleep taking seconds (defaults to asyncio.sleep)
        **kwargs: Keyword arguments for func

    Returns:
        Result from func, unchanged

    Raises:
        Exception: The last failure once retries are exhausted, or any
            non-transient failure immediately, as raised by func
    """
    policy = policy or DEFAULT_RETRY_POLICY

    retrying = AsyncRetrying(
        sleep=sleep or asyncio.sleep,
        retry=retry_if_exception(_is_transient),
        before_sleep=_log_backoff,
        **policy.to_tenacity(),
    )
    async for attempt in retrying:
        with attempt:
            return await func(*args, **kwargs)


def should_retry(kind: ErrorKind) -> bool:
    """Check if an error kind indicates a retryable error."""
    return is_retryable(kind)
