"""
Environment configuration.

Values are read once at import time (after loading an optional `.env` file)
and copied into `app.config` by `create_app()`. Provider adapters receive
their settings from `app.config`, never from `os.environ` at request time.
"""
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_csv_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name)
    source = raw if raw is not None else default
    return [token.strip().lower() for token in source.split(",") if token and token.strip()]


APP_ENV = os.getenv("APP_ENV", "development")
DEPLOY_PLATFORM = os.getenv("DEPLOY_PLATFORM", "local")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Upper bound for every outbound provider call (seconds)
HTTP_TIMEOUT = _get_float("HTTP_TIMEOUT", 10.0)

SAAVN_API_BASE = os.getenv("SAAVN_API_BASE", "https://saavn.me/api").rstrip("/")

SOUNDCLOUD_CLIENT_ID = os.getenv("SOUNDCLOUD_CLIENT_ID") or None
SOUNDCLOUD_API_BASE = os.getenv("SOUNDCLOUD_API_BASE", "https://api-v2.soundcloud.com").rstrip("/")
SOUNDCLOUD_TIMEOUT = _get_float("SOUNDCLOUD_TIMEOUT", 8.0)
SOUNDCLOUD_PAGE_SIZE = _get_int("SOUNDCLOUD_PAGE_SIZE", 20)

YOUTUBE_RESULT_LIMIT = min(_get_int("YOUTUBE_RESULT_LIMIT", 20), 25)

SEARCH_PROVIDERS = _get_csv_list("SEARCH_PROVIDERS", "jiosaavn,youtube")
TRENDING_PROVIDERS = _get_csv_list("TRENDING_PROVIDERS", "jiosaavn,youtube")
SOUNDCLOUD_PROVIDERS = _get_csv_list("SOUNDCLOUD_PROVIDERS", "soundcloud,youtube")

DEFAULT_LIMIT = 20
MAX_LIMIT = 50

PLACEHOLDER_IMAGE = os.getenv("PLACEHOLDER_IMAGE", "https://picsum.photos/500/500?grayscale")

STATIC_DIR = os.getenv("STATIC_DIR", "dist")
STREAM_CHUNK_SIZE = _get_int("STREAM_CHUNK_SIZE", 64 * 1024)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")


def as_dict() -> dict:
    """Upper-case module settings, ready for `app.config.update()`."""
    return {key: value for key, value in globals().items() if key.isupper()}
