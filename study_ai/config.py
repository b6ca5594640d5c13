"""Service settings and OpenAI credential validation.

Settings are read once per process into a ``Settings`` object which is then
passed to the handler, the task executors and the model resolver.
"""
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_API_KEY_LENGTH = 20
API_KEY_PREFIX = 'sk-'
DEFAULT_MODEL = 'gpt-3.5-turbo'


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        extra='ignore',
        populate_by_name=True,
    )

    host: str = Field(default='0.0.0.0', alias='HOST')
    port: int = Field(default=8000, alias='PORT')
    environment: str = Field(default='development', alias='ENVIRONMENT')
    log_level: str = Field(default='INFO', alias='LOG_LEVEL')
    cors_origin: str = Field(default='*', alias='CORS_ORIGIN')

    openai_api_key: Optional[str] = Field(default=None, alias='OPENAI_API_KEY')
    openai_model: str = Field(default=DEFAULT_MODEL, alias='OPENAI_MODEL')
    openai_fallback_models: str = Field(default='', alias='OPENAI_FALLBACK_MODELS')
    openai_timeout: float = Field(default=60.0, alias='OPENAI_TIMEOUT')
    mock_openai: bool = Field(default=False, alias='MOCK_OPENAI')

    redis_url: Optional[str] = Field(default=None, alias='REDIS_URL')
    note_ttl_seconds: int = Field(default=0, alias='NOTE_TTL_SECONDS')
    max_upload_size_kb: int = Field(default=512, alias='MAX_UPLOAD_SIZE_KB')


class ConfigValidation(BaseModel):
    valid: bool
    error: Optional[str] = None


def validate_openai_config(settings: Settings) -> ConfigValidation:
    """Check the OpenAI credential without contacting the API.

    The first violated rule wins: the key must be set, be at least
    ``MIN_API_KEY_LENGTH`` characters long and start with ``API_KEY_PREFIX``.
    """
    api_key = settings.openai_api_key
    if not api_key:
        return ConfigValidation(valid=False, error='OPENAI_API_KEY environment variable is not set')
    if len(api_key) < MIN_API_KEY_LENGTH:
        return ConfigValidation(valid=False, error=f'OPENAI_API_KEY appears to be invalid (expected at least {MIN_API_KEY_LENGTH} characters)')
    if not api_key.startswith(API_KEY_PREFIX):
        return ConfigValidation(valid=False, error=f"OPENAI_API_KEY appears to be invalid (expected to start with '{API_KEY_PREFIX}')")
    return ConfigValidation(valid=True)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
