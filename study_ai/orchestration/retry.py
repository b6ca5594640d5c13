"""Retry of a single model attempt with exponential backoff.

Built on tenacity, but driven by result values: every attempt yields a
``Success`` or a ``Failure`` and tenacity only retries failures whose error is
retryable. Once attempts run out the last ``Failure`` is returned as-is.
"""
import asyncio
from typing import Awaitable, Callable

from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential, retry_if_result

from study_ai.utils import get_logger, log_ai_attempt_failure

from .errors import classify_error
from .outcome import Success, Failure, Outcome

LOG = get_logger()

MAX_ATTEMPTS = 3
INITIAL_RETRY_DELAY_SECONDS = 1.0

Sleep = Callable[[float], Awaitable[None]]


def _is_retryable_failure(outcome: Outcome) -> bool:
    return not outcome.ok and outcome.error.retryable


def _log_retry(label: str):
    def _before_sleep(retry_state):
        delay_ms = int(retry_state.next_action.sleep * 1000)
        LOG.info('ai_retry_scheduled', extra={'operation': label, 'attempt': retry_state.attempt_number, 'delay_ms': delay_ms})
    return _before_sleep


def _last_outcome(retry_state) -> Outcome:
    return retry_state.outcome.result()


async def run_with_retry(attempt: Callable[[], Awaitable], label: str, sleep: Sleep = asyncio.sleep) -> Outcome:
    """Run ``attempt`` up to ``MAX_ATTEMPTS`` times.

    Waits 1s then 2s between attempts, never after the last one. A
    non-retryable failure ends the loop at once.
    """
    attempt_number = 0

    async def _attempt() -> Outcome:
        nonlocal attempt_number
        attempt_number += 1
        try:
            value = await attempt()
        except Exception as exc:
            error = classify_error(exc)
            log_ai_attempt_failure(label, attempt_number, MAX_ATTEMPTS, error.code.value, error.message, error.status_code, error.retryable)
            return Failure(error)
        return Success(value)

    retrying = AsyncRetrying(
        stop=stop_after_attempt(MAX_ATTEMPTS),
        wait=wait_exponential(multiplier=INITIAL_RETRY_DELAY_SECONDS, exp_base=2),
        retry=retry_if_result(_is_retryable_failure),
        retry_error_callback=_last_outcome,
        before_sleep=_log_retry(label),
        sleep=sleep,
    )
    return await retrying(_attempt)
