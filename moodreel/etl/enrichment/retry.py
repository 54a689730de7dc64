"""Retry policy for AI generation calls.

Rate-limit errors back off exponentially with jitter up to a ceiling;
any other error is retried after a short fixed delay. Both categories
have their own attempt budget so a run can never loop forever.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from tenacity import (
    RetryCallState,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    wait_exponential_jitter,
    wait_fixed,
)
from tenacity.stop import stop_base
from tenacity.wait import wait_base

from moodreel.services.llm.llm_service import LLMRateLimitError
from moodreel.settings import PipelineSettings, settings

logger = logging.getLogger(__name__)

RATE_LIMIT_MARKERS = ("429", "quota", "rate limit", "rate-limit")
"""Substrings identifying a rate-limit error from its message."""


def is_rate_limit_error(error: BaseException | None) -> bool:
    """Check if an error signals a quota or rate limit."""
    if error is None:
        return False
    if isinstance(error, LLMRateLimitError):
        return True
    message = str(error).lower()
    return any(marker in message for marker in RATE_LIMIT_MARKERS)


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budgets and delays.

    Attributes:
        max_rate_limit_attempts: Attempts allowed while rate limited.
        max_other_attempts: Attempts allowed for other errors.
        initial_backoff: First rate-limit delay, doubled at each attempt.
        max_backoff: Ceiling of the rate-limit delay.
        other_error_delay: Delay before retrying other errors.
    """

    max_rate_limit_attempts: int = 8
    max_other_attempts: int = 3
    initial_backoff: float = 5.0
    max_backoff: float = 120.0
    other_error_delay: float = 2.0

    @classmethod
    def from_settings(cls, config: PipelineSettings | None = None) -> "RetryPolicy":
        config = config or settings.pipeline
        return cls(
            max_rate_limit_attempts=config.max_rate_limit_attempts,
            max_other_attempts=config.max_other_attempts,
            initial_backoff=config.initial_backoff,
            max_backoff=config.max_backoff,
            other_error_delay=config.other_error_delay,
        )


# =============================================================================
# TENACITY STRATEGIES
# =============================================================================


def _last_error(retry_state: RetryCallState) -> BaseException | None:
    if retry_state.outcome is None:
        return None
    return retry_state.outcome.exception()


class wait_for_error_category(wait_base):
    """Jittered exponential wait on rate limits, fixed wait otherwise."""

    def __init__(self, policy: RetryPolicy) -> None:
        self._rate_limit_wait = wait_exponential_jitter(
            initial=policy.initial_backoff,
            max=policy.max_backoff,
            jitter=policy.initial_backoff,
        )
        self._other_wait = wait_fixed(policy.other_error_delay)

    def __call__(self, retry_state: RetryCallState) -> float:
        if is_rate_limit_error(_last_error(retry_state)):
            return self._rate_limit_wait(retry_state)
        return self._other_wait(retry_state)


class stop_for_error_category(stop_base):
    """Stop once the attempt count reaches the budget of the last error."""

    def __init__(self, policy: RetryPolicy) -> None:
        self._policy = policy

    def __call__(self, retry_state: RetryCallState) -> bool:
        if is_rate_limit_error(_last_error(retry_state)):
            limit = self._policy.max_rate_limit_attempts
        else:
            limit = self._policy.max_other_attempts
        return retry_state.attempt_number >= limit


def build_retrying(
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
) -> Retrying:
    """Create a tenacity controller for one AI call.

    Args:
        policy: Attempt budgets and delays.
        sleep: Sleep function (replaced in tests).

    Returns:
        Retrying instance re-raising the last error when exhausted.
    """
    return Retrying(
        retry=retry_if_exception_type(Exception),
        stop=stop_for_error_category(policy),
        wait=wait_for_error_category(policy),
        sleep=sleep,
        reraise=True,
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
