import json
import re
from typing import Any, List

from pydantic import TypeAdapter, ValidationError

from study_ai.orchestration import parse_error
from study_ai.utils import get_logger

LOG = get_logger()

_OPENING_FENCE = re.compile(r'^\s*```(?:json)?[ \t]*\n?', re.IGNORECASE)
_CLOSING_FENCE = re.compile(r'\n?```\s*$')


def strip_code_fences(text: str) -> str:
    # only the fence wrapping the whole reply; fences inside string values are content
    return _CLOSING_FENCE.sub('', _OPENING_FENCE.sub('', text)).strip()


def parse_json_array(raw: str, adapter: TypeAdapter, subject: str) -> List[Any]:
    """Parse model output into a validated list, or raise a retryable PARSE_ERROR."""
    cleaned = strip_code_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        LOG.error('ai_output_parse_failed', extra={'subject': subject, 'error': str(e), 'response_preview': raw[:200]})
        raise parse_error(subject) from e
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        LOG.error('ai_output_validation_failed', extra={'subject': subject, 'error': str(e), 'response_preview': raw[:200]})
        raise parse_error(subject) from e
