"""
sources/__init__.py

`build_fetchers(config)` returns a dict of provider name → adapter instance,
built once at start-up from explicit settings.

Each adapter is imported inside a guard, so a missing optional dependency
(ytmusicapi, say) only makes that provider unavailable instead of crashing
the whole server. The orchestrator records missing providers as
`not_configured` and moves on down its chain.
"""
import importlib

from bloomee.logger import get_logger

logger = get_logger("sources")


def _try_build(fetchers: dict, name: str, module: str, cls: str, **kwargs):
    try:
        mod = importlib.import_module(module)
        fetchers[name] = getattr(mod, cls)(**kwargs)
        logger.info(f"Fetcher loaded: {name}")
    except ImportError as e:
        logger.warning(f"Fetcher '{name}' unavailable: {e}")


def build_fetchers(config) -> dict:
    common = {
        "timeout": config.get("HTTP_TIMEOUT", 10.0),
        "placeholder_image": config.get("PLACEHOLDER_IMAGE"),
    }
    fetchers: dict = {}

    _try_build(fetchers, "jiosaavn", "bloomee.sources.jiosaavn_fetcher", "JioSaavnFetcher",
               base_url=config.get("SAAVN_API_BASE", "https://saavn.me/api"), **common)
    _try_build(fetchers, "soundcloud", "bloomee.sources.soundcloud_fetcher", "SoundCloudFetcher",
               client_id=config.get("SOUNDCLOUD_CLIENT_ID"),
               api_base=config.get("SOUNDCLOUD_API_BASE", "https://api-v2.soundcloud.com"),
               page_size=config.get("SOUNDCLOUD_PAGE_SIZE", 20),
               timeout=config.get("SOUNDCLOUD_TIMEOUT", 8.0),
               placeholder_image=common["placeholder_image"])
    _try_build(fetchers, "youtube", "bloomee.sources.youtube_fetcher", "YoutubeFetcher",
               result_limit=config.get("YOUTUBE_RESULT_LIMIT", 20), **common)
    _try_build(fetchers, "youtube-music", "bloomee.sources.youtube_fetcher", "YoutubeMusicFetcher",
               result_limit=config.get("YOUTUBE_RESULT_LIMIT", 20), **common)

    unconfigured = [name for name, f in fetchers.items() if not f.configured]
    if unconfigured:
        logger.warning(f"Fetchers without credentials (will fall back): {unconfigured}")
    logger.info(f"Active fetchers: {list(fetchers.keys())}")
    return fetchers
