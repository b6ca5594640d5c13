import os
import pytest

# keep test runs from writing rotating log files
os.environ.setdefault('LOG_FILE_PATH', '')

from study_ai.config import Settings
from tests.fixtures.fake_backend import RecordingSleep

VALID_KEY = 'sk-' + 'x' * 20


@pytest.fixture
def make_settings():
    def _make(**overrides):
        values = {
            'OPENAI_API_KEY': VALID_KEY,
            'OPENAI_MODEL': 'gpt-3.5-turbo',
            'OPENAI_FALLBACK_MODELS': '',
            'MOCK_OPENAI': False,
            'REDIS_URL': None,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def sample_notes():
    return (
        'Photosynthesis converts light energy into chemical energy.\n'
        'It takes place in the chloroplasts of plant cells.\n'
        'Chlorophyll is the pigment that absorbs light.'
    )
