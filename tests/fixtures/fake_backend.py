import json

import httpx
import openai

from study_ai.orchestration import CompletionBackend

OPENAI_URL = 'https://api.openai.com/v1/chat/completions'

MOCK_FLASHCARDS_JSON = json.dumps([
    {'front': 'What is photosynthesis?', 'back': 'Conversion of light energy into chemical energy.'},
    {'front': 'Where does it occur?', 'back': 'In the chloroplasts.'},
])

MOCK_QUIZ_JSON = json.dumps([
    {'question': 'Which pigment absorbs light?', 'options': ['Chlorophyll', 'Keratin', 'Melanin', 'Hemoglobin'], 'correct_answer': 0},
])


def api_status_error(status: int, message: str = 'backend said no') -> openai.APIStatusError:
    request = httpx.Request('POST', OPENAI_URL)
    response = httpx.Response(status, request=request)
    return openai.APIStatusError(message, response=response, body=None)


def api_timeout_error() -> openai.APITimeoutError:
    return openai.APITimeoutError(request=httpx.Request('POST', OPENAI_URL))


def api_connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(request=httpx.Request('POST', OPENAI_URL))


class FakeBackend(CompletionBackend):
    """Scripted stand-in for the OpenAI backend.

    Each call consumes the next scripted item: strings (or None) are returned,
    exceptions are raised. ``per_model`` scripts take precedence for their model.
    Once a script is exhausted its last item repeats.
    """

    def __init__(self, *script, per_model=None):
        self.script = list(script) or ['ok']
        self.per_model = {k: list(v) for k, v in (per_model or {}).items()}
        self.calls = []

    def _next(self, model):
        items = self.per_model.get(model, self.script)
        return items.pop(0) if len(items) > 1 else items[0]

    async def complete(self, model, system_prompt, user_content, max_tokens):
        self.calls.append({'model': model, 'system_prompt': system_prompt, 'user_content': user_content, 'max_tokens': max_tokens})
        item = self._next(model)
        if isinstance(item, BaseException):
            raise item
        return item

    @property
    def models_called(self):
        return [c['model'] for c in self.calls]


class RecordingSleep:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)
