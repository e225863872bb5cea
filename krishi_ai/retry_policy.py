"""
Bounded retry with linear backoff.

Each model call runs through RetryPolicy.execute(). Retryable failures
(rate limits, quota, empty/invalid output) wait base_delay * attempt and try
again; fatal failures stop at once. The policy never raises for a failed
attempt: the caller gets a RetryOutcome and decides what to return when it
is exhausted.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar

from .errors import ErrorKind, OutputValidationError, classify_error
from .structured_logging import StructuredLogger

logger = StructuredLogger(__name__)

T = TypeVar("T")

AttemptFn = Callable[[], Awaitable[T]]
Classifier = Callable[[BaseException], ErrorKind]
SleepFn = Callable[[float], Awaitable[Any]]


@dataclass
class AttemptRecord:
    attempt: int
    delay: float = 0.0  # backoff before the next attempt; 0 if none followed
    error_kind: Optional[ErrorKind] = None  # None on success
    error: Optional[str] = None


@dataclass
class RetryOutcome(Generic[T]):
    result: Optional[T] = None
    attempts: List[AttemptRecord] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.result is not None

    @property
    def exhausted(self) -> bool:
        return self.result is None

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)


def _is_empty(result: Any) -> bool:
    if result is None:
        return True
    try:
        return len(result) == 0
    except TypeError:
        return False


class RetryPolicy:
    """Retry a single async operation with linear backoff.

    Args:
        max_attempts: Total attempts allowed, including the first (>= 1)
        base_delay: Seconds; the wait after attempt n is base_delay * n
        classify: Maps an exception to RETRYABLE or FATAL
        sleep: Awaitable sleep, swappable in tests
        name: Label used in log messages; the caller may supply one per execute()
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 2.0,
        classify: Classifier = classify_error,
        sleep: SleepFn = asyncio.sleep,
        name: Optional[str] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.classify = classify
        self.sleep = sleep
        self.name = name

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * attempt

    async def execute(
        self,
        attempt_fn: AttemptFn,
        is_valid: Optional[Callable[[Any], bool]] = None,
        name: Optional[str] = None,
    ) -> RetryOutcome:
        """Run attempt_fn until it yields a valid result or the budget is spent.

        Args:
            attempt_fn: Zero-argument coroutine function performing one call
            is_valid: Optional extra check on a returned result; a result that
                is None, empty, or fails this check counts as a retryable failure
            name: Log label used when the policy was built without one

        Returns:
            RetryOutcome with result set on success, or result None when exhausted
        """
        label = self.name or name or "flow"
        outcome: RetryOutcome = RetryOutcome()

        for attempt in range(1, self.max_attempts + 1):
            record = AttemptRecord(attempt=attempt)
            outcome.attempts.append(record)

            try:
                result = await attempt_fn()
                if _is_empty(result) or (is_valid is not None and not is_valid(result)):
                    raise OutputValidationError("Model returned an empty or invalid response")
                outcome.result = result
                return outcome
            except Exception as error:
                kind = self.classify(error)
                record.error_kind = kind
                record.error = str(error)

                if kind is ErrorKind.RETRYABLE and attempt < self.max_attempts:
                    delay = self.delay_for(attempt)
                    record.delay = delay
                    logger.warning(
                        f"{label} failed with a retryable error; retrying in {delay}s "
                        f"(attempt {attempt}/{self.max_attempts})",
                        attempt=attempt,
                        max_attempts=self.max_attempts,
                        delay=delay,
                        error=record.error,
                    )
                    await self.sleep(delay)
                    continue

                logger.error(
                    f"Error in {label}: {error}",
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    error_kind=kind.value,
                )
                break

        return outcome


async def execute(
    attempt_fn: AttemptFn,
    classify: Classifier = classify_error,
    max_attempts: int = 3,
    base_delay: float = 2.0,
    is_valid: Optional[Callable[[Any], bool]] = None,
    sleep: SleepFn = asyncio.sleep,
) -> RetryOutcome:
    """One-shot form of RetryPolicy(...).execute(...)."""
    policy = RetryPolicy(
        max_attempts=max_attempts,
        base_delay=base_delay,
        classify=classify,
        sleep=sleep,
    )
    return await policy.execute(attempt_fn, is_valid=is_valid)
