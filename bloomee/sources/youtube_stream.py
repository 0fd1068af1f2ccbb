"""
YouTube stream resolver.

Turns a video id into a live audio byte stream:

1. yt-dlp extracts the video's formats (no download).
2. yt-dlp selects the best audio-only format ("bestaudio"), using its own
   ranking (original-language tracks before dubs, then quality).
3. The format URL is opened with a streaming httpx request and relayed.

The first chunk is read before the HTTP response starts, so any upstream
failure up to that point still becomes a clean 500 JSON answer. Once bytes
have gone out, a failure aborts the transfer. The upstream response and
client are released on every exit path through `AudioStream.close()`.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator
from urllib.parse import quote

import httpx
import yt_dlp
from yt_dlp.utils import YoutubeDLError

from bloomee.errors import ResolutionError, StreamTransportError
from bloomee.logger import get_logger
from .base_fetcher import USER_AGENT

logger = get_logger("youtube_stream")

WATCH_URL = "https://www.youtube.com/watch?v={}"
AUDIO_FORMAT = "bestaudio"
PASSTHROUGH_HEADERS = ("Content-Length", "Content-Range")


@dataclass
class AudioFormat:
    url: str
    format_id: str = ""
    http_headers: Dict[str, str] = field(default_factory=dict)


def _is_audio_only(fmt: dict) -> bool:
    return (
        bool(fmt.get("url"))
        and fmt.get("vcodec") == "none"
        and fmt.get("acodec") not in (None, "none")
    )


def get_stream_client(timeout: float = 10.0) -> httpx.Client:
    return httpx.Client(
        timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
    )


class AudioStream:
    """One open upstream media response, relayed chunk by chunk."""

    def __init__(self, client: httpx.Client, response: httpx.Response, video_id: str,
                 chunk_size: int = 64 * 1024):
        self.video_id = video_id
        self.status_code = response.status_code if response.status_code in (206, 416) else 200
        self.headers = {
            name: response.headers[name] for name in PASSTHROUGH_HEADERS if name in response.headers
        }
        self.closed = False
        self._client = client
        self._response = response
        self._chunks = response.iter_bytes(chunk_size)
        self._first = b""

    def prime(self):
        """Read the first chunk now, while an error can still become a 500."""
        try:
            self._first = next(self._chunks, b"")
        except httpx.HTTPError as e:
            self.close()
            raise StreamTransportError(details=str(e) or type(e).__name__) from e

    def iter_bytes(self) -> Iterator[bytes]:
        try:
            if self._first:
                first, self._first = self._first, b""
                yield first
            for chunk in self._chunks:
                yield chunk
        except httpx.HTTPError as e:
            # Bytes are already out; abort the transfer instead of ending it cleanly
            logger.error(f"Stream error for {self.video_id} after start: {e}")
            raise
        finally:
            self.close()

    def close(self):
        if self.closed:
            return
        self.closed = True
        try:
            self._response.close()
        finally:
            self._client.close()
        self._chunks = iter(())
        logger.debug(f"Upstream stream closed for {self.video_id}")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class YoutubeStreamResolver:
    def __init__(self, timeout: float = 10.0, chunk_size: int = 64 * 1024,
                 ydl_factory: Callable = yt_dlp.YoutubeDL,
                 client_factory: Callable[..., httpx.Client] = get_stream_client):
        self.timeout = timeout
        self.chunk_size = chunk_size
        self._ydl_factory = ydl_factory
        self._client_factory = client_factory

    def _ydl_opts(self) -> dict:
        return {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
            "noplaylist": True,
            "format": AUDIO_FORMAT,
            "socket_timeout": self.timeout,
            "http_headers": {"User-Agent": USER_AGENT},
        }

    def resolve(self, video_id: str) -> AudioFormat:
        """
        Let yt-dlp pick the best audio-only format. Videos without one fail
        inside yt-dlp ("Requested format is not available") and surface as
        ResolutionError like any other extraction failure.
        """
        try:
            with self._ydl_factory(self._ydl_opts()) as ydl:
                info = ydl.extract_info(WATCH_URL.format(quote(video_id, safe="")), download=False)
        except YoutubeDLError as e:
            logger.error(f"yt-dlp extraction failed for {video_id}: {e}")
            raise ResolutionError(details=str(e), provider="youtube") from e

        if not isinstance(info, dict) or not _is_audio_only(info):
            logger.warning(f"No audio-only format for {video_id}")
            raise ResolutionError("No audio-only format available", provider="youtube")

        logger.info(f"Resolved {video_id} to format {info.get('format_id')} ({info.get('abr')} kbps)")
        return AudioFormat(
            url=info["url"],
            format_id=str(info.get("format_id") or ""),
            http_headers=dict(info.get("http_headers") or {}),
        )

    def open(self, video_id: str, range_header: str | None = None) -> AudioStream:
        """
        Resolve and open the upstream audio. The returned stream is primed:
        its first chunk has been read, so nothing below can fail before the
        caller starts its response. An unsatisfiable range comes back as an
        already-closed, empty stream with status 416.
        """
        fmt = self.resolve(video_id)
        headers = dict(fmt.http_headers)
        if range_header:
            headers["Range"] = range_header

        client = self._client_factory(self.timeout)
        try:
            response = client.send(client.build_request("GET", fmt.url, headers=headers), stream=True)
        except httpx.HTTPError as e:
            client.close()
            logger.error(f"Upstream connect failed for {video_id}: {e}")
            raise StreamTransportError(details=str(e) or type(e).__name__, provider="youtube") from e

        if response.status_code == 416 and range_header:
            # Seek past the end: relay the 416 and its "bytes */N" Content-Range
            logger.info(f"Unsatisfiable range {range_header!r} for {video_id}")
            stream = AudioStream(client, response, video_id, chunk_size=self.chunk_size)
            stream.headers.pop("Content-Length", None)
            stream.close()
            return stream

        if response.status_code >= 400:
            response.close()
            client.close()
            logger.error(f"Upstream returned HTTP {response.status_code} for {video_id}")
            raise StreamTransportError(
                details=f"upstream HTTP {response.status_code}", provider="youtube"
            )

        stream = AudioStream(client, response, video_id, chunk_size=self.chunk_size)
        stream.prime()
        return stream
