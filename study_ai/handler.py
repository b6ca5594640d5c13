"""Boundary between the HTTP layer and the study task executors.

``StudyRequestHandler.handle`` validates the inbound body, dispatches on
``action`` and renders every outcome, successful or not, as a
``HandlerResponse`` envelope. It is the only place that turns ``AIError``
values into wire-format error bodies.
"""
import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from study_ai.config import Settings, validate_openai_config
from study_ai.orchestration import AIError, CompletionBackend, ErrorCode, OpenAIBackend, Outcome
from study_ai.orchestration.retry import Sleep
from study_ai.semantic import Summarizer, FlashcardGenerator, QuizGenerator, QuestionAnswerer
from study_ai.utils import get_logger

LOG = get_logger()

VALID_ACTIONS = ('summarize', 'flashcards', 'quiz', 'qa')


@dataclass
class HandlerResponse:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


def error_response(error: AIError) -> HandlerResponse:
    return HandlerResponse(error.status_code, error.to_dict())


def _validation_error(message: str) -> AIError:
    return AIError(message, ErrorCode.VALIDATION_ERROR, 400, False)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _dump(value: Any) -> Any:
    if isinstance(value, list):
        return [v.model_dump() if hasattr(v, 'model_dump') else v for v in value]
    return value


class StudyRequestHandler:
    def __init__(self, settings: Settings, backend: Optional[CompletionBackend] = None, sleep: Sleep = asyncio.sleep):
        self.settings = settings
        self.backend = backend or OpenAIBackend(settings)
        self.summarizer = Summarizer(settings, self.backend, sleep)
        self.flashcards = FlashcardGenerator(settings, self.backend, sleep)
        self.quiz = QuizGenerator(settings, self.backend, sleep)
        self.answerer = QuestionAnswerer(settings, self.backend, sleep)

    async def handle(self, raw_body: Union[bytes, str, Dict[str, Any]]) -> HandlerResponse:
        try:
            return await self._handle(raw_body)
        except AIError as e:
            LOG.warning('ai_request_failed', extra={'code': e.code.value, 'status_code': e.status_code})
            return error_response(e)
        except Exception:
            LOG.exception('ai_request_internal_error', exc_info=True)
            return HandlerResponse(500, {'error': 'Internal server error', 'code': ErrorCode.INTERNAL_ERROR.value})

    async def _handle(self, raw_body) -> HandlerResponse:
        # mock mode never reaches the backend, so the credential is not needed
        if not self.settings.mock_openai:
            config = validate_openai_config(self.settings)
            if not config.valid:
                LOG.error('openai_config_invalid', extra={'error': config.error})
                raise AIError(config.error, ErrorCode.CONFIG_ERROR, 500, False)

        body = self._parse_body(raw_body)
        action = body.get('action')
        content = body.get('content')
        question = body.get('question')

        if _is_blank(action):
            raise _validation_error('Action is required')
        if _is_blank(content):
            raise _validation_error('Content is required')
        if action == 'qa' and _is_blank(question):
            raise _validation_error('Question is required for Q&A')

        LOG.info('ai_request_dispatch', extra={'action': action, 'content_length': len(content)})
        if action == 'summarize':
            return self._render('summary', await self.summarizer.summarize(content))
        if action == 'flashcards':
            return self._render('flashcards', await self.flashcards.generate(content))
        if action == 'quiz':
            return self._render('quiz', await self.quiz.generate(content))
        if action == 'qa':
            return self._render('answer', await self.answerer.answer(content, question))
        raise _validation_error(f"Invalid action. Valid actions are: {', '.join(VALID_ACTIONS)}")

    @staticmethod
    def _parse_body(raw_body) -> Dict[str, Any]:
        if isinstance(raw_body, dict):
            return raw_body
        try:
            body = json.loads(raw_body)
        except (TypeError, ValueError) as e:
            raise AIError('Request body must be valid JSON', ErrorCode.PARSE_ERROR, 400, False) from e
        if not isinstance(body, dict):
            raise _validation_error('Request body must be a JSON object')
        return body

    @staticmethod
    def _render(key: str, outcome: Outcome) -> HandlerResponse:
        if not outcome.ok:
            return error_response(outcome.error)
        return HandlerResponse(200, {key: _dump(outcome.value)})
