from typing import Any, Dict, List

from bloomee.errors import NotFoundError, ProviderError
from bloomee.logger import get_logger
from bloomee.schema import build_song
from .base_fetcher import BaseFetcher

logger = get_logger("jiosaavn_fetcher")

DEFAULT_BASE_URL = "https://saavn.me/api"
TRENDING_QUERY = "trending"


def _quality_list(value) -> List[Dict[str, str]]:
    """Mirror variants send either [{quality, link|url}] or a bare URL string."""
    if isinstance(value, str):
        return [{"quality": "default", "link": value}] if value else []
    if isinstance(value, list):
        return [
            {"quality": item.get("quality") or "default", "link": item.get("link") or item.get("url") or ""}
            for item in value
            if isinstance(item, dict)
        ]
    return []


def _artists(song: dict) -> str:
    value = song.get("primaryArtists") or song.get("primary_artists")
    if isinstance(value, str) and value:
        return value
    artists = song.get("artists")
    if isinstance(artists, dict):
        names = [a.get("name") for a in artists.get("primary") or [] if isinstance(a, dict) and a.get("name")]
        if names:
            return ", ".join(names)
    return str(song.get("singers") or song.get("music") or "")


def _parse_song(song: dict) -> Dict[str, Any]:
    """Map one raw mirror record onto the normalized schema."""
    try:
        duration = int(song.get("duration") or 0)
    except (TypeError, ValueError):
        duration = 0

    downloads = _quality_list(song.get("downloadUrl") or song.get("download_url"))
    if not downloads and song.get("media_url"):
        downloads = [{"quality": "320kbps", "link": song["media_url"]}]

    return build_song(
        song.get("id"),
        song.get("name") or song.get("title") or song.get("song") or "",
        _artists(song),
        _quality_list(song.get("image")),
        downloads,
        duration,
        "jiosaavn",
        url=song.get("url") or song.get("perma_url"),
        album=song.get("album"),
        year=song.get("year"),
        language=song.get("language"),
        explicitContent=song.get("explicitContent"),
    )


def _extract_results(payload) -> List[dict]:
    """Unwrap the envelope variants the mirrors use."""
    if isinstance(payload, dict):
        status = str(payload.get("status") or "").lower()
        if status in ("failed", "error") or payload.get("success") is False:
            raise ProviderError(
                "JioSaavn returned an error",
                details=payload.get("message") or payload.get("error"),
                provider="jiosaavn",
            )
        data = payload.get("data", payload.get("results"))
        if isinstance(data, dict):
            data = data.get("results")
        if isinstance(data, dict):
            data = [data]
        payload = data
    if isinstance(payload, list):
        return [item for item in payload if isinstance(item, dict)]
    raise ProviderError("JioSaavn returned an unexpected response shape", provider="jiosaavn")


class JioSaavnFetcher(BaseFetcher):
    source_name = "jiosaavn"

    def __init__(self, base_url: str = DEFAULT_BASE_URL, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")

    async def search(self, query: str, page: int = 1, limit: int = 20) -> List[Dict[str, Any]]:
        """Search the mirror, forwarding query/page/limit verbatim."""
        payload = await self.get_json(
            f"{self.base_url}/search/songs",
            params={"query": query, "page": page, "limit": limit},
        )
        songs = self.finalize(_parse_song(s) for s in _extract_results(payload))
        logger.info(f"JioSaavn search found {len(songs)} results for '{query}'")
        return songs

    async def trending(self, limit: int = 20) -> List[Dict[str, Any]]:
        return await self.search(TRENDING_QUERY, page=1, limit=limit)

    async def get_song(self, song_id: str) -> Dict[str, Any]:
        """Fetch one song's details. Raises NotFoundError for unknown ids."""
        payload = await self.get_json(f"{self.base_url}/songs", params={"id": song_id})
        songs = self.finalize(_parse_song(s) for s in _extract_results(payload))
        if not songs:
            logger.warning(f"JioSaavn has no song with id {song_id}")
            raise NotFoundError("Song not found", provider=self.source_name)
        return songs[0]
