"""
Retry utilities for provider throttling.

Used by LLM adapters to ride out rate limiting before a call is reported
as a GenerationFailure. Incomplete responses are not retried here; that is
the retry orchestrator's job.
"""
import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Optional, Set, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


# Error names worth retrying for Bedrock (class names or botocore error codes)
PROVIDER_RETRYABLE_ERRORS = {
    "ThrottlingException",
    "ServiceUnavailableException",
    "InternalServerException",
    "ModelNotReadyException",
    "ReadTimeoutError",
    "ConnectTimeoutError",
}

_THROTTLE_HINTS = ("throttl", "rate limit", "too many requests", "capacity")


def is_retryable_error(error: Exception, retryable_types: Optional[Set[str]] = None) -> bool:
    """
    Check if a provider error is transient.

    Args:
        error: The exception to check
        retryable_types: Error names to retry (defaults to PROVIDER_RETRYABLE_ERRORS)

    Returns:
        True if error should be retried
    """
    if retryable_types is None:
        retryable_types = PROVIDER_RETRYABLE_ERRORS

    if type(error).__name__ in retryable_types:
        return True

    message = str(error).lower()
    if any(hint in message for hint in _THROTTLE_HINTS):
        return True

    # botocore ClientError carries the code in its response dict
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        code = response.get("Error", {}).get("Code", "")
        if code in retryable_types:
            return True

    return False


class RetryConfig:
    """Configuration for provider retry behavior."""

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 20.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
    ):
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter

    def delay_for(self, attempt: int) -> float:
        """Backoff before retry number attempt + 1 (0-based attempt)."""
        delay = min(self.base_delay * (self.exponential_base ** attempt), self.max_delay)
        if self.jitter:
            delay = delay * (1 + random.random() * 0.5)
        return delay

    @classmethod
    def for_bedrock(cls) -> "RetryConfig":
        """Standard retry config for Bedrock runtime calls."""
        return cls(max_retries=3, base_delay=1.0, max_delay=20.0)

    @classmethod
    def disabled(cls) -> "RetryConfig":
        """No retries (tests, or callers with their own retry loop)."""
        return cls(max_retries=0, jitter=False)


async def retry_with_backoff(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    config: Optional[RetryConfig] = None,
    retryable_check: Optional[Callable[[Exception], bool]] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    **kwargs: Any,
) -> T:
    """
    Await func with exponential backoff on transient errors.

    Args:
        func: Async function to execute
        *args: Positional arguments for func
        config: Retry settings (RetryConfig.for_bedrock() by default)
        retryable_check: Decides whether an error is transient
        sleep: Awaitable sleep, injectable for tests
        **kwargs: Keyword arguments for func

    Returns:
        Result of func

    Raises:
        The last error once retries are exhausted, or the first
        non-retryable error
    """
    config = config or RetryConfig.for_bedrock()
    retryable_check = retryable_check or is_retryable_error

    attempt = 0
    while True:
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            if attempt >= config.max_retries or not retryable_check(e):
                if attempt:
                    logger.error(f"Retry exhausted after {attempt + 1} attempts: {e}")
                raise

            delay = config.delay_for(attempt)
            attempt += 1
            logger.warning(f"Retry attempt {attempt}/{config.max_retries} after {delay:.1f}s: {e}")
            await sleep(delay)
