"""Tests for retry service with exponential backoff."""

import pytest
from pydantic import ValidationError

from generationproxy.models.errors import ClassifiedError, ErrorKind
from generationproxy.services.retry_service import RetryPolicy, retry_with_backoff, should_retry


class FlakyOperation:
    """Helper operation that fails a certain number of times then succeeds."""

    def __init__(self, error: Exception, fail_count: int = 0):
        self.error = error
        self.fail_count = fail_count
        self.call_count = 0

    async def __call__(self):
        self.call_count += 1
        if self.call_count <= self.fail_count:
            raise self.error
        return "success"


def overloaded() -> ClassifiedError:
    return ClassifiedError(ErrorKind.OVERLOADED, "Simulated overload", status_code=503)


@pytest.mark.asyncio
async def test_retry_succeeds_after_failures(sleep_recorder):
    """Test that retry succeeds after transient failures."""
    operation = FlakyOperation(overloaded(), fail_count=2)

    result = await retry_with_backoff(operation, sleep=sleep_recorder)

    assert result == "success"
    assert operation.call_count == 3  # Initial + 2 retries


@pytest.mark.asyncio
async def test_retry_exhausts_after_max_attempts(sleep_recorder):
    """Always-transient failures are attempted max_retries + 1 times, then propagated."""
    operation = FlakyOperation(overloaded(), fail_count=999)

    with pytest.raises(ClassifiedError) as exc_info:
        await retry_with_backoff(operation, sleep=sleep_recorder)

    assert exc_info.value.kind == ErrorKind.OVERLOADED
    assert operation.call_count == 4  # 1 attempt + 3 retries


@pytest.mark.asyncio
async def test_retry_exponential_backoff_delays(sleep_recorder):
    """Delays start at initial_delay_ms and double: 1s, 2s, 4s."""
    operation = FlakyOperation(overloaded(), fail_count=999)

    with pytest.raises(ClassifiedError):
        await retry_with_backoff(operation, sleep=sleep_recorder)

    assert sleep_recorder.delays == [1.0, 2.0, 4.0]


@pytest.mark.asyncio
async def test_retry_custom_policy_delays(sleep_recorder):
    """Custom initial delay and multiplier are honored."""
    operation = FlakyOperation(overloaded(), fail_count=999)
    policy = RetryPolicy(max_retries=2, initial_delay_ms=500, backoff_multiplier=3.0)

    with pytest.raises(ClassifiedError):
        await retry_with_backoff(operation, policy=policy, sleep=sleep_recorder)

    assert operation.call_count == 3
    assert sleep_recorder.delays == [0.5, 1.5]


@pytest.mark.asyncio
async def test_retry_succeeds_on_first_attempt(sleep_recorder):
    """Test that retry doesn't retry if first attempt succeeds."""
    operation = FlakyOperation(overloaded(), fail_count=0)

    result = await retry_with_backoff(operation, sleep=sleep_recorder)

    assert result == "success"
    assert operation.call_count == 1
    assert sleep_recorder.delays == []


@pytest.mark.asyncio
async def test_success_value_passed_through_unchanged(sleep_recorder):
    payload = {"a": [1, 2]}

    async def operation():
        return payload

    assert await retry_with_backoff(operation, sleep=sleep_recorder) is payload


@pytest.mark.asyncio
async def test_zero_retry_budget_attempts_once(sleep_recorder):
    operation = FlakyOperation(overloaded(), fail_count=999)

    with pytest.raises(ClassifiedError):
        await retry_with_backoff(operation, policy=RetryPolicy(max_retries=0), sleep=sleep_recorder)

    assert operation.call_count == 1
    assert sleep_recorder.delays == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kind,status",
    [
        (ErrorKind.PAYLOAD_TOO_LARGE, 413),
        (ErrorKind.UNAUTHORIZED, 401),
        (ErrorKind.FORBIDDEN, 403),
        (ErrorKind.QUOTA_EXCEEDED, 429),
        (ErrorKind.MALFORMED_RESPONSE, None),
        (ErrorKind.MISSING_CREDENTIAL, None),
    ],
)
async def test_no_retry_on_permanent_kinds(sleep_recorder, kind, status):
    """Permanent failures propagate after exactly one attempt with no delay."""
    operation = FlakyOperation(ClassifiedError(kind, "permanent", status_code=status), fail_count=999)

    with pytest.raises(ClassifiedError) as exc_info:
        await retry_with_backoff(operation, sleep=sleep_recorder)

    assert exc_info.value.kind == kind
    assert operation.call_count == 1
    assert sleep_recorder.delays == []


@pytest.mark.asyncio
async def test_unknown_errors_propagate_as_is(sleep_recorder):
    """Unclassified exceptions are not retried and are not wrapped."""
    operation = FlakyOperation(ValueError("Non-retryable error"), fail_count=999)

    with pytest.raises(ValueError, match="Non-retryable error"):
        await retry_with_backoff(operation, sleep=sleep_recorder)

    assert operation.call_count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("message", ["Rpc failed", "Model is Overloaded", "deadline exceeded"])
async def test_unclassified_transient_messages_are_retried(sleep_recorder, message):
    """Plain exceptions whose message signals a transient failure are retried."""
    operation = FlakyOperation(RuntimeError(message), fail_count=1)

    result = await retry_with_backoff(operation, sleep=sleep_recorder)

    assert result == "success"
    assert operation.call_count == 2
    assert sleep_recorder.delays == [1.0]


@pytest.mark.asyncio
async def test_retry_passes_arguments(sleep_recorder):
    async def add(a, b, scale=1):
        return (a + b) * scale

    assert await retry_with_backoff(add, 1, 2, scale=10, sleep=sleep_recorder) == 30


def test_should_retry_retryable_kinds():
    """Test that should_retry returns True for transient kinds."""
    assert should_retry(ErrorKind.OVERLOADED) is True


def test_should_retry_non_retryable_kinds():
    """Test that should_retry returns False for permanent kinds."""
    for kind in ErrorKind:
        if kind is not ErrorKind.OVERLOADED:
            assert should_retry(kind) is False


def test_retry_policy_defaults():
    policy = RetryPolicy()

    assert policy.max_retries == 3
    assert policy.initial_delay_ms == 1000
    assert policy.backoff_multiplier == 2.0
    assert policy.max_attempts == 4
    assert [policy.delay_ms(n) for n in (1, 2, 3)] == [1000, 2000, 4000]


def test_retry_policy_validation():
    with pytest.raises(ValidationError):
        RetryPolicy(max_retries=-1)
    with pytest.raises(ValidationError):
        RetryPolicy(initial_delay_ms=0)
    with pytest.raises(ValidationError):
        RetryPolicy(backoff_multiplier=1.0)
