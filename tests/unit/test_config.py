import pytest

from study_ai.config import validate_openai_config, DEFAULT_MODEL
from study_ai.orchestration import resolve_preferred_models


@pytest.mark.unit
def test_valid_key(make_settings):
    res = validate_openai_config(make_settings(OPENAI_API_KEY='sk-' + 'x' * 20))
    assert res.valid is True
    assert res.error is None


@pytest.mark.unit
def test_missing_key(make_settings):
    res = validate_openai_config(make_settings(OPENAI_API_KEY=None))
    assert res.valid is False
    assert 'not set' in res.error


@pytest.mark.unit
def test_short_key(make_settings):
    res = validate_openai_config(make_settings(OPENAI_API_KEY='abc'))
    assert res.valid is False
    assert 'at least 20' in res.error


@pytest.mark.unit
def test_wrong_prefix(make_settings):
    res = validate_openai_config(make_settings(OPENAI_API_KEY='xk-' + 'x' * 20))
    assert res.valid is False
    assert "'sk-'" in res.error


@pytest.mark.unit
def test_short_key_reported_before_prefix(make_settings):
    # 'abc' violates both rules; length is checked first
    res = validate_openai_config(make_settings(OPENAI_API_KEY='abc'))
    assert 'characters' in res.error


@pytest.mark.unit
def test_resolver_dedupes_and_keeps_order(make_settings):
    s = make_settings(OPENAI_MODEL='gpt-4', OPENAI_FALLBACK_MODELS='gpt-4, gpt-3.5-turbo, gpt-4')
    assert resolve_preferred_models(s) == ['gpt-4', 'gpt-3.5-turbo']
    # idempotent
    assert resolve_preferred_models(s) == resolve_preferred_models(s)


@pytest.mark.unit
def test_resolver_defaults(make_settings):
    assert resolve_preferred_models(make_settings(OPENAI_MODEL='  ')) == [DEFAULT_MODEL]
    assert resolve_preferred_models(make_settings()) == ['gpt-3.5-turbo']


@pytest.mark.unit
def test_resolver_trims_and_drops_empty_entries(make_settings):
    s = make_settings(OPENAI_MODEL=' gpt-4o ', OPENAI_FALLBACK_MODELS=' , gpt-4o-mini,,  gpt-4 ,')
    assert resolve_preferred_models(s) == ['gpt-4o', 'gpt-4o-mini', 'gpt-4']


@pytest.mark.unit
def test_resolver_reads_settings_each_call(make_settings):
    s = make_settings(OPENAI_MODEL='gpt-4')
    assert resolve_preferred_models(s) == ['gpt-4']
    s.openai_fallback_models = 'gpt-4o-mini'
    assert resolve_preferred_models(s) == ['gpt-4', 'gpt-4o-mini']
