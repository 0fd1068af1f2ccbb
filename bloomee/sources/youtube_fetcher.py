import requests
from typing import Any, Dict, List

from ytmusicapi import YTMusic

from bloomee.errors import ProviderError
from bloomee.logger import get_logger
from bloomee.schema import build_song
from bloomee.utils import parse_clock
from .base_fetcher import BaseFetcher, USER_AGENT

logger = get_logger("youtube_fetcher")

STREAM_PATH = "/api/youtube/stream"
TRENDING_QUERY = "trending music"
MAX_RESULTS = 25


class TimeoutSession(requests.Session):
    """requests.Session that applies a default timeout to every call."""

    def __init__(self, timeout: float):
        super().__init__()
        self.timeout = timeout
        self.headers.update({"User-Agent": USER_AGENT})

    def request(self, method, url, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        return super().request(method, url, **kwargs)


def stream_link(video_id: str) -> str:
    return f"{STREAM_PATH}?id={video_id}"


def _thumbnails(result: dict) -> List[Dict[str, str]]:
    images = []
    for thumb in result.get("thumbnails") or []:
        if not isinstance(thumb, dict) or not thumb.get("url"):
            continue
        width, height = thumb.get("width"), thumb.get("height")
        quality = f"{width}x{height}" if width and height else "default"
        images.append({"quality": quality, "link": thumb["url"]})
    return images


def _channel(result: dict) -> str:
    names = [a.get("name") for a in result.get("artists") or [] if isinstance(a, dict) and a.get("name")]
    if names:
        return ", ".join(names)
    author = result.get("author")
    if isinstance(author, dict):
        return author.get("name") or ""
    return str(author or "")


def _duration(result: dict) -> int:
    seconds = result.get("duration_seconds")
    if isinstance(seconds, (int, float)):
        return int(seconds)
    return parse_clock(result.get("duration"))


class YoutubeFetcher(BaseFetcher):
    """
    YouTube search through ytmusicapi's scrape of the public search index,
    not the official Data API. Every download link points back at this
    service's own stream endpoint.
    """

    source_name = "youtube"
    song_type = "youtube"

    def __init__(self, result_limit: int = 20, ytmusic: YTMusic | None = None, **kwargs):
        super().__init__(**kwargs)
        self.result_limit = min(result_limit, MAX_RESULTS)
        self._ytmusic = ytmusic

    def _client(self) -> YTMusic:
        # YTMusic is not thread-safe; one instance per call
        if self._ytmusic is not None:
            return self._ytmusic
        return YTMusic(requests_session=TimeoutSession(self.timeout))

    def build_query(self, query: str) -> str:
        return query

    def _parse_video(self, result: dict) -> Dict[str, Any]:
        video_id = result.get("videoId")
        return build_song(
            video_id,
            result.get("title") or "",
            _channel(result),
            _thumbnails(result),
            [{"quality": "high", "link": stream_link(video_id)}] if video_id else [],
            _duration(result),
            self.song_type,
        )

    def search(self, query: str, page: int = 1, limit: int | None = None) -> List[Dict[str, Any]]:
        upstream_query = self.build_query(query)
        cap = min(limit or self.result_limit, self.result_limit)
        try:
            results = self._client().search(upstream_query, filter="videos", limit=cap)
        except Exception as e:
            raise ProviderError(
                f"{self.source_name} search failed", details=str(e), provider=self.source_name
            ) from e

        songs = self.finalize(
            self._parse_video(r) for r in (results or [])[:cap] if isinstance(r, dict)
        )
        logger.info(f"{self.source_name} search found {len(songs)} results for '{upstream_query}'")
        return songs

    def trending(self, limit: int = 20) -> List[Dict[str, Any]]:
        return self.search(TRENDING_QUERY, limit=limit)


class YoutubeMusicFetcher(YoutubeFetcher):
    """Same search, biased toward music by appending "music" to the query."""

    source_name = "youtube-music"
    song_type = "youtube-music"

    def build_query(self, query: str) -> str:
        if "music" in query.lower():
            return query
        return f"{query} music"
