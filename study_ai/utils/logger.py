"""Structured logging for the study AI service.

Every record from the ``study_ai`` logger carries the ``request_id`` and
``action`` of the request being served, taken from a context variable that
the HTTP middleware sets. Fields passed explicitly through ``extra`` win.

Environment:
    LOG_LEVEL      threshold, default INFO
    LOG_FORMAT     ``json`` (default) or ``text``
    LOG_FILE_PATH  directory for combined.log/error.log; empty disables files
    LOG_MAX_SIZE   bytes per file before rotation
    LOG_MAX_FILES  rotated files kept
"""
import os
import sys
import logging
import pathlib
import contextvars
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Optional

from pythonjsonlogger import jsonlogger

LOGGER_NAME = 'study_ai'
JSON_FIELDS = '%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s %(action)s'
TEXT_FIELDS = '%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s'

_request_ctx: contextvars.ContextVar = contextvars.ContextVar('study_ai_request', default={})


def set_request_context(request_id: str, action: Optional[str] = None):
    _request_ctx.set({'request_id': request_id, 'action': action})


def get_request_context() -> Dict[str, Any]:
    return _request_ctx.get()


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        ctx = get_request_context()
        for key in ('request_id', 'action'):
            if getattr(record, key, None) is None:
                setattr(record, key, ctx.get(key))
        return True


def _formatter(log_format: str) -> logging.Formatter:
    if log_format == 'json':
        return jsonlogger.JsonFormatter(JSON_FIELDS)
    return logging.Formatter(TEXT_FIELDS)


def _file_handlers(directory: str, formatter: logging.Formatter) -> List[logging.Handler]:
    path = pathlib.Path(directory)
    if not path.is_absolute():
        path = pathlib.Path.cwd() / path
    path.mkdir(parents=True, exist_ok=True)

    max_bytes = int(os.getenv('LOG_MAX_SIZE', str(10 * 1024 * 1024)))
    backups = int(os.getenv('LOG_MAX_FILES', '7'))

    handlers = []
    for filename, level in (('combined.log', logging.NOTSET), ('error.log', logging.ERROR)):
        handler = RotatingFileHandler(path / filename, maxBytes=max_bytes, backupCount=backups)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handlers.append(handler)
    return handlers


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
    formatter = _formatter(os.getenv('LOG_FORMAT', 'json'))

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    log_dir = os.getenv('LOG_FILE_PATH', 'logs')
    if log_dir:
        for handler in _file_handlers(log_dir, formatter):
            logger.addHandler(handler)

    logger.addFilter(RequestContextFilter())
    return logger


def log_request(request_id: str, method: str, path: str, status_code: int, duration_ms: float, ip: str = None):
    level = logging.WARNING if status_code >= 500 else logging.INFO
    get_logger().log(level, 'http_request_end', extra={
        'request_id': request_id,
        'method': method,
        'path': path,
        'status_code': status_code,
        'duration_ms': duration_ms,
        'ip': ip,
    })


def log_error(error: Exception, context: dict = None):
    fields = dict(context or {})
    fields['error_type'] = type(error).__name__
    get_logger().error('unhandled_error', exc_info=error, extra=fields)


def log_llm_call(request_id: str, model: str, prompt_tokens: int, completion_tokens: int, duration_ms: float, max_tokens: int = None):
    get_logger().info('llm_call', extra={
        'request_id': request_id,
        'model': model,
        'prompt_tokens': prompt_tokens,
        'completion_tokens': completion_tokens,
        'total_tokens': prompt_tokens + completion_tokens,
        'max_tokens': max_tokens,
        'duration_ms': duration_ms,
    })


def log_ai_attempt_failure(operation: str, attempt: int, max_attempts: int, code: str, message: str, status_code: int, retryable: bool):
    get_logger().warning('ai_attempt_failed', extra={
        'operation': operation,
        'attempt': attempt,
        'max_attempts': max_attempts,
        'code': code,
        'error_message': message,
        'status_code': status_code,
        'retryable': retryable,
    })


def log_generation(request_id: str, action: str, item_count: int, duration_ms: float, mock: bool = False):
    get_logger().info('generation', extra={
        'request_id': request_id,
        'action': action,
        'item_count': item_count,
        'duration_ms': duration_ms,
        'mock': mock,
    })
