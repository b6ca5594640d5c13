"""Typed AI errors and classification of backend failures.

Every failure is classified exactly once, at the point where it happens, into
an ``AIError`` carrying a stable ``code``, an HTTP-style ``status_code`` and a
``retryable`` flag. Callers branch on those fields instead of on exception
types coming from the OpenAI SDK.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict

import openai


class ErrorCode(str, Enum):
    CONFIG_ERROR = 'CONFIG_ERROR'
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    PARSE_ERROR = 'PARSE_ERROR'
    AUTH_ERROR = 'AUTH_ERROR'
    FORBIDDEN = 'FORBIDDEN'
    RATE_LIMIT = 'RATE_LIMIT'
    BAD_REQUEST = 'BAD_REQUEST'
    SERVICE_ERROR = 'SERVICE_ERROR'
    API_ERROR = 'API_ERROR'
    UNKNOWN_ERROR = 'UNKNOWN_ERROR'
    INTERNAL_ERROR = 'INTERNAL_ERROR'
    NOT_FOUND = 'NOT_FOUND'


SERVICE_UNAVAILABLE_STATUSES = (500, 502, 503, 504)


class AIError(Exception):
    """A classified failure. Treated as immutable once constructed."""

    def __init__(self, message: str, code: ErrorCode, status_code: int = 500, retryable: bool = False):
        super().__init__(message)
        self.message = message
        self.code = ErrorCode(code)
        self.status_code = status_code
        self.retryable = retryable

    def to_dict(self) -> Dict[str, Any]:
        return {'error': self.message, 'code': self.code.value, 'retryable': self.retryable}

    def __repr__(self):
        return f'AIError(code={self.code.value!r}, status_code={self.status_code}, retryable={self.retryable}, message={self.message!r})'


def classify_status(status: int, message: str) -> AIError:
    if status == 401:
        return AIError('Invalid API key. Please check your OPENAI_API_KEY configuration.', ErrorCode.AUTH_ERROR, 401, False)
    if status == 403:
        return AIError('Access forbidden. Your API key may not have access to this model.', ErrorCode.FORBIDDEN, 403, False)
    if status == 429:
        return AIError('Rate limit exceeded. Please try again in a few moments.', ErrorCode.RATE_LIMIT, 429, True)
    if status == 400:
        return AIError(f'Bad request: {message}', ErrorCode.BAD_REQUEST, 400, False)
    if status in SERVICE_UNAVAILABLE_STATUSES:
        return AIError('OpenAI service is temporarily unavailable. Please try again.', ErrorCode.SERVICE_ERROR, status, True)
    return AIError(f'API error: {message}', ErrorCode.API_ERROR, status, status >= 500)


def classify_error(error: BaseException) -> AIError:
    """Map any failure raised during an AI attempt to an ``AIError``."""
    if isinstance(error, AIError):
        return error
    if isinstance(error, openai.APIStatusError):
        status = error.status_code or 500
        return classify_status(status, error.message or 'Unknown API error')
    # APITimeoutError subclasses APIConnectionError, so it is checked first
    if isinstance(error, openai.APITimeoutError):
        return AIError('OpenAI request timed out. Please try again.', ErrorCode.SERVICE_ERROR, 504, True)
    if isinstance(error, openai.APIConnectionError):
        return AIError('Could not connect to the OpenAI service. Please try again.', ErrorCode.SERVICE_ERROR, 503, True)
    message = str(error) or 'Unknown error occurred'
    return AIError(message, ErrorCode.UNKNOWN_ERROR, 500, False)


def parse_error(subject: str) -> AIError:
    """Error for AI output that is not valid JSON of the expected shape."""
    return AIError(f'Failed to parse {subject} response from AI. Please try again.', ErrorCode.PARSE_ERROR, 500, True)
