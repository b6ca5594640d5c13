import asyncio
import time
from typing import Any, Callable, Optional

from study_ai.config import Settings
from study_ai.orchestration import CompletionBackend, Outcome, Success, run_across_models
from study_ai.orchestration.retry import Sleep
from study_ai.utils import get_logger, get_request_context, log_generation

LOG = get_logger()


class StudyTaskExecutor:
    """Shared plumbing for the four study tasks.

    Subclasses supply the prompt and interpret the raw completion text. The
    interpretation runs inside the attempt, so a retried parse failure issues
    a fresh backend request rather than re-reading the same text.
    """

    action: str = ''
    operation: str = ''
    max_tokens: int = 1000

    def __init__(self, settings: Settings, backend: CompletionBackend, sleep: Sleep = asyncio.sleep):
        self.settings = settings
        self.backend = backend
        self.sleep = sleep

    @property
    def mock_mode(self) -> bool:
        return bool(self.settings.mock_openai)

    def _mock_result(self, result: Any) -> Outcome:
        LOG.info('ai_mock_response', extra={'operation': self.operation})
        log_generation(get_request_context().get('request_id'), self.action, _item_count(result), 0, mock=True)
        return Success(result)

    async def _run(self, system_prompt: str, user_content: str, interpret: Callable[[Optional[str]], Any]) -> Outcome:
        def factory(model: str):
            async def attempt():
                raw = await self.backend.complete(model, system_prompt, user_content, self.max_tokens)
                return interpret(raw)
            return attempt

        LOG.info('ai_task_start', extra={'operation': self.operation, 'content_length': len(user_content)})
        start = time.time()
        outcome = await run_across_models(factory, self.operation, self.settings, sleep=self.sleep)
        duration_ms = int((time.time() - start) * 1000)
        if outcome.ok:
            log_generation(get_request_context().get('request_id'), self.action, _item_count(outcome.value), duration_ms)
        else:
            LOG.error('ai_task_failed', extra={'operation': self.operation, 'code': outcome.error.code.value, 'duration_ms': duration_ms})
        return outcome


def _item_count(result: Any) -> int:
    return len(result) if isinstance(result, list) else 1
