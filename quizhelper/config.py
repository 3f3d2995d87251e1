"""
Configuration Module
Settings read from environment variables (optionally via a .env file).
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_ANSWER_ENDPOINT = 'http://localhost:3001/getAnswer'


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == '':
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}")


@dataclass
class CanvasConfig:
    """Canvas instance and credentials used for login."""
    canvas_url: str
    username: str
    password: str

    @classmethod
    def from_env(cls) -> 'CanvasConfig':
        canvas_url = os.getenv('CANVAS_URL')
        username = os.getenv('CANVAS_USERNAME')
        password = os.getenv('CANVAS_PASSWORD')

        if not canvas_url or not username or not password:
            raise ConfigError(
                'Missing environment variables. Please set CANVAS_URL, '
                'CANVAS_USERNAME, and CANVAS_PASSWORD.'
            )
        return cls(canvas_url=canvas_url.rstrip('/'), username=username, password=password)


@dataclass
class Settings:
    """Runtime settings for the answer pipeline and the browser."""
    answer_endpoint_url: str = DEFAULT_ANSWER_ENDPOINT
    answer_timeout: int = 30
    answer_concurrency: int = 1
    browser_headless: bool = True
    browser_timeout: int = 30000
    openai_api_key: Optional[str] = None
    openai_api_url: str = 'https://api.openai.com/v1/chat/completions'
    openai_model: str = 'gpt-4o'
    port: int = 3001

    @classmethod
    def from_env(cls, dotenv: bool = True) -> 'Settings':
        """Build settings from the environment, loading .env first."""
        if dotenv:
            load_dotenv()

        settings = cls(
            answer_endpoint_url=os.getenv('ANSWER_ENDPOINT_URL') or DEFAULT_ANSWER_ENDPOINT,
            answer_timeout=_env_int('ANSWER_TIMEOUT', 30),
            answer_concurrency=_env_int('ANSWER_CONCURRENCY', 1),
            browser_headless=_env_bool('BROWSER_HEADLESS', True),
            browser_timeout=_env_int('BROWSER_TIMEOUT', 30000),
            openai_api_key=os.getenv('OPENAI_API_KEY'),
            openai_api_url=os.getenv('OPENAI_API_URL') or cls.openai_api_url,
            openai_model=os.getenv('OPENAI_MODEL') or cls.openai_model,
            port=_env_int('PORT', 3001),
        )
        if settings.answer_concurrency < 1:
            raise ConfigError("ANSWER_CONCURRENCY must be at least 1")
        return settings
