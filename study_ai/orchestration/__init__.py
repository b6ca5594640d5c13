"""
AI request orchestration: error classification, retry with backoff and
model fallback around a chat-completion backend.
"""
from .errors import AIError, ErrorCode, classify_error, classify_status, parse_error
from .outcome import Success, Failure, Outcome
from .models import resolve_preferred_models
from .retry import run_with_retry, MAX_ATTEMPTS, INITIAL_RETRY_DELAY_SECONDS
from .fallback import run_across_models
from .backend import CompletionBackend, OpenAIBackend

__all__ = [
	'AIError', 'ErrorCode', 'classify_error', 'classify_status', 'parse_error',
	'Success', 'Failure', 'Outcome',
	'resolve_preferred_models',
	'run_with_retry', 'MAX_ATTEMPTS', 'INITIAL_RETRY_DELAY_SECONDS',
	'run_across_models',
	'CompletionBackend', 'OpenAIBackend',
]
