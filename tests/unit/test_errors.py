import json

import pytest

from study_ai.orchestration import AIError, ErrorCode, classify_error
from tests.fixtures.fake_backend import api_status_error, api_timeout_error, api_connection_error


@pytest.mark.unit
@pytest.mark.parametrize('status,code,retryable', [
    (401, ErrorCode.AUTH_ERROR, False),
    (403, ErrorCode.FORBIDDEN, False),
    (429, ErrorCode.RATE_LIMIT, True),
    (400, ErrorCode.BAD_REQUEST, False),
    (500, ErrorCode.SERVICE_ERROR, True),
    (502, ErrorCode.SERVICE_ERROR, True),
    (503, ErrorCode.SERVICE_ERROR, True),
    (504, ErrorCode.SERVICE_ERROR, True),
    (404, ErrorCode.API_ERROR, False),
    (409, ErrorCode.API_ERROR, False),
    (507, ErrorCode.API_ERROR, True),
])
def test_classify_status_table(status, code, retryable):
    err = classify_error(api_status_error(status))
    assert err.code == code
    assert err.status_code == status
    assert err.retryable is retryable


@pytest.mark.unit
def test_bad_request_keeps_backend_message():
    err = classify_error(api_status_error(400, 'max_tokens is too large'))
    assert 'max_tokens is too large' in err.message


@pytest.mark.unit
def test_classified_error_passes_through_unchanged():
    original = AIError('boom', ErrorCode.PARSE_ERROR, 500, True)
    assert classify_error(original) is original


@pytest.mark.unit
def test_local_exception_is_unknown():
    err = classify_error(ValueError('something odd'))
    assert err.code == ErrorCode.UNKNOWN_ERROR
    assert err.status_code == 500
    assert err.retryable is False
    assert err.message == 'something odd'


@pytest.mark.unit
def test_transport_failures_are_retryable_service_errors():
    timeout = classify_error(api_timeout_error())
    assert (timeout.code, timeout.status_code, timeout.retryable) == (ErrorCode.SERVICE_ERROR, 504, True)
    conn = classify_error(api_connection_error())
    assert (conn.code, conn.status_code, conn.retryable) == (ErrorCode.SERVICE_ERROR, 503, True)


@pytest.mark.unit
def test_to_dict_is_json_serializable():
    err = AIError('Rate limit exceeded', ErrorCode.RATE_LIMIT, 429, True)
    body = err.to_dict()
    assert body == {'error': 'Rate limit exceeded', 'code': 'RATE_LIMIT', 'retryable': True}
    json.dumps(body)
