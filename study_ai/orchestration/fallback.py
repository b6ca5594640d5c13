import asyncio
from typing import Awaitable, Callable, Optional

from study_ai.config import Settings
from study_ai.utils import get_logger

from .errors import ErrorCode
from .models import resolve_preferred_models
from .outcome import Failure, Outcome
from .retry import run_with_retry, Sleep

LOG = get_logger()

AttemptFactory = Callable[[str], Callable[[], Awaitable]]


async def run_across_models(factory: AttemptFactory, label: str, settings: Settings, sleep: Sleep = asyncio.sleep) -> Outcome:
    """Try each preferred model in turn until one succeeds.

    Only a ``FORBIDDEN`` failure moves on to the next model; any other failure
    is returned immediately. Models are attempted strictly one after another.
    """
    models = resolve_preferred_models(settings)
    last_failure: Optional[Failure] = None

    for model in models:
        LOG.info('ai_model_attempt', extra={'operation': label, 'model': model})
        outcome = await run_with_retry(factory(model), label, sleep=sleep)
        if outcome.ok:
            LOG.info('ai_model_succeeded', extra={'operation': label, 'model': model})
            return outcome

        last_failure = outcome
        LOG.info('ai_model_failed', extra={'operation': label, 'model': model, 'code': outcome.error.code.value})
        if outcome.error.code != ErrorCode.FORBIDDEN:
            return outcome
        LOG.info('ai_model_forbidden', extra={'operation': label, 'model': model})

    LOG.error('ai_all_models_forbidden', extra={'operation': label, 'models': models})
    return last_failure
