from typing import Any, Dict, List

from bloomee.errors import ProviderError
from bloomee.logger import get_logger
from bloomee.schema import build_song
from .base_fetcher import BaseFetcher

logger = get_logger("soundcloud_fetcher")

DEFAULT_API_BASE = "https://api-v2.soundcloud.com"
CHARTS_GENRE = "soundcloud:genres:all-music"


def _artwork(track: dict) -> List[Dict[str, str]]:
    """
    SoundCloud serves "-large" (100x100) artwork URLs; the same asset is
    available at 500x500 by swapping the suffix. Tracks without artwork
    fall back to the uploader's avatar.
    """
    user = track.get("user") or {}
    link = track.get("artwork_url") or user.get("avatar_url")
    if not link:
        return []
    images = [{"quality": "100x100", "link": link}]
    if "-large." in link:
        images.append({"quality": "500x500", "link": link.replace("-large.", "-t500x500.")})
    return images


def _parse_track(track: dict) -> Dict[str, Any]:
    try:
        duration = int(track.get("duration") or 0) // 1000
    except (TypeError, ValueError):
        duration = 0

    permalink = track.get("permalink_url") or ""
    user = track.get("user") or {}
    # Direct stream URLs need further authenticated calls; the client
    # player resolves the permalink instead.
    return build_song(
        track.get("id"),
        track.get("title") or "",
        user.get("username") or "",
        _artwork(track),
        [{"quality": "high", "link": permalink}] if permalink else [],
        duration,
        "soundcloud",
        url=permalink,
    )


def _collection(payload) -> List[dict]:
    if not isinstance(payload, dict) or not isinstance(payload.get("collection"), list):
        raise ProviderError("SoundCloud returned an unexpected response shape", provider="soundcloud")
    return [item for item in payload["collection"] if isinstance(item, dict)]


class SoundCloudFetcher(BaseFetcher):
    source_name = "soundcloud"

    def __init__(self, client_id: str | None = None, api_base: str = DEFAULT_API_BASE,
                 page_size: int = 20, **kwargs):
        super().__init__(**kwargs)
        self.client_id = client_id or None
        self.api_base = api_base.rstrip("/")
        self.page_size = page_size

    @property
    def configured(self) -> bool:
        return self.client_id is not None

    async def search(self, query: str, page: int = 1, limit: int = 20) -> List[Dict[str, Any]]:
        """
        Search tracks. Always asks for the first fixed-size page (offset 0);
        `page` is accepted for interface parity only, `limit` caps the
        returned list.
        """
        self.require_configured()
        payload = await self.get_json(
            f"{self.api_base}/search/tracks",
            params={
                "q": query,
                "client_id": self.client_id,
                "limit": self.page_size,
                "offset": 0,
            },
        )
        songs = self.finalize(_parse_track(t) for t in _collection(payload))[:limit]
        logger.info(f"SoundCloud search found {len(songs)} results for '{query}'")
        return songs

    async def trending(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Featured tracks from the top-charts endpoint."""
        self.require_configured()
        payload = await self.get_json(
            f"{self.api_base}/charts",
            params={
                "kind": "top",
                "genre": CHARTS_GENRE,
                "client_id": self.client_id,
                "limit": self.page_size,
            },
        )
        tracks = [item.get("track") or item for item in _collection(payload)]
        songs = self.finalize(_parse_track(t) for t in tracks if isinstance(t, dict))[:limit]
        logger.info(f"SoundCloud charts returned {len(songs)} tracks")
        return songs
