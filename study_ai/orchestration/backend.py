"""Chat-completion backends.

``OpenAIBackend`` wraps the async OpenAI client. Anything with the same
``complete`` coroutine can stand in for it, which is how tests inject fakes.
"""
import time
from typing import Optional

from openai import AsyncOpenAI

from study_ai.config import Settings
from study_ai.utils import get_logger, get_request_context, log_llm_call

LOG = get_logger()


class CompletionBackend:
    async def complete(self, model: str, system_prompt: str, user_content: str, max_tokens: int) -> Optional[str]:
        raise NotImplementedError


class OpenAIBackend(CompletionBackend):
    def __init__(self, settings: Settings):
        self.settings = settings
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        # created on first use so a missing key surfaces as CONFIG_ERROR first
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.openai_timeout,
                max_retries=0,
            )
            LOG.info('OpenAI client initialized', extra={'timeout': self.settings.openai_timeout})
        return self._client

    async def complete(self, model: str, system_prompt: str, user_content: str, max_tokens: int) -> Optional[str]:
        start = time.time()
        completion = await self.client.chat.completions.create(
            model=model,
            messages=[
                {'role': 'system', 'content': system_prompt},
                {'role': 'user', 'content': user_content},
            ],
            max_tokens=max_tokens,
        )
        duration_ms = int((time.time() - start) * 1000)
        usage = completion.usage
        log_llm_call(
            get_request_context().get('request_id'),
            model,
            usage.prompt_tokens if usage else 0,
            usage.completion_tokens if usage else 0,
            duration_ms,
            max_tokens=max_tokens,
        )
        if not completion.choices:
            return None
        return completion.choices[0].message.content

    async def close(self):
        if self._client is not None:
            await self._client.close()
            self._client = None
