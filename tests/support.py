import httpx


def make_song(song_id="s1", name="Song", song_type="youtube", **extra):
    song = {
        "id": song_id,
        "name": name,
        "primaryArtists": "Artist",
        "image": [{"quality": "high", "link": f"https://img.example/{song_id}.jpg"}],
        "downloadUrl": [{"quality": "high", "link": f"/api/youtube/stream?id={song_id}"}],
        "duration": 200,
        "type": song_type,
    }
    song.update(extra)
    return song


class FakeFetcher:
    """Adapter double that records calls and returns or raises on demand."""

    def __init__(self, name, songs=None, error=None, configured=True):
        self.source_name = name
        self.songs = songs if songs is not None else []
        self.error = error
        self.configured = configured
        self.calls = []

    def _answer(self, op, *args, **kwargs):
        self.calls.append((op, args, kwargs))
        if self.error is not None:
            raise self.error
        return list(self.songs)

    async def search(self, query, page=1, limit=20):
        return self._answer("search", query, page=page, limit=limit)

    async def trending(self, limit=20):
        return self._answer("trending", limit=limit)

    async def get_song(self, song_id):
        self._answer("get_song", song_id)
        return self.songs[0]


class FakeYTMusic:
    def __init__(self, results=None, error=None):
        self.results = results or []
        self.error = error
        self.queries = []

    def search(self, query, filter=None, limit=20):
        self.queries.append({"query": query, "filter": filter, "limit": limit})
        if self.error is not None:
            raise self.error
        return list(self.results)


def yt_result(video_id="dQw4w9WgXcQ", title="Video", seconds=125, channel="Channel"):
    return {
        "resultType": "video",
        "videoId": video_id,
        "title": title,
        "artists": [{"name": channel, "id": "UC123"}],
        "duration": f"{seconds // 60}:{seconds % 60:02d}",
        "duration_seconds": seconds,
        "thumbnails": [
            {"url": f"https://i.ytimg.com/vi/{video_id}/hq.jpg", "width": 480, "height": 360},
            {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg", "width": 120, "height": 90},
        ],
    }


class RecordingTransport:
    """Builds httpx client factories on top of MockTransport and keeps the requests."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def _handle(self, request):
        self.requests.append(request)
        return self.handler(request)

    def async_factory(self, timeout=10.0, **kwargs):
        return httpx.AsyncClient(transport=httpx.MockTransport(self._handle), timeout=timeout)


