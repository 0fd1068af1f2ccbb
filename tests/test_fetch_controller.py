import asyncio

import pytest

from bloomee.errors import AllProvidersFailedError, ConfigurationError
from bloomee.fetch_controller import resolve
from bloomee.sources.soundcloud_fetcher import SoundCloudFetcher
from bloomee.sources.youtube_fetcher import YoutubeFetcher
from tests.support import FakeFetcher, FakeYTMusic, make_song, yt_result


def test_primary_answer_is_returned_without_fallback():
    primary = FakeFetcher("jiosaavn", songs=[make_song("p1", song_type="jiosaavn")])
    secondary = FakeFetcher("youtube", songs=[make_song("y1")])

    result = asyncio.run(resolve({"jiosaavn": primary, "youtube": secondary}, ["jiosaavn", "youtube"], "search", "q"))

    assert result.source == "jiosaavn"
    assert result.attempts == []
    assert secondary.calls == []


def test_failure_falls_back_with_same_raw_query(failing_fetcher):
    secondary = FakeFetcher("youtube", songs=[make_song("y1")])
    fetchers = {"jiosaavn": failing_fetcher("jiosaavn"), "youtube": secondary}

    result = asyncio.run(resolve(fetchers, ["jiosaavn", "youtube"], "search", "raw query", limit=7))

    assert result.source == "youtube"
    assert result.songs[0]["id"] == "y1"
    assert result.attempts[0]["api"] == "jiosaavn"
    assert result.attempts[0]["status"] == "error"
    assert secondary.calls == [("search", ("raw query",), {"page": 1, "limit": 7})]


def test_unexpected_exception_also_falls_back():
    broken = FakeFetcher("jiosaavn", error=KeyError("data"))
    fetchers = {"jiosaavn": broken, "youtube": FakeFetcher("youtube", songs=[make_song()])}

    result = asyncio.run(resolve(fetchers, ["jiosaavn", "youtube"], "trending", limit=5))

    assert result.source == "youtube"


def test_missing_provider_is_skipped():
    fetchers = {"youtube": FakeFetcher("youtube", songs=[make_song()])}

    result = asyncio.run(resolve(fetchers, ["soundcloud", "youtube"], "search", "q"))

    assert result.source == "youtube"
    assert result.attempts == [{"api": "soundcloud", "status": "not_configured"}]


def test_empty_primary_falls_through_but_empty_final_is_returned():
    fetchers = {"jiosaavn": FakeFetcher("jiosaavn"), "youtube": FakeFetcher("youtube")}

    result = asyncio.run(resolve(fetchers, ["jiosaavn", "youtube"], "search", "nothing"))

    assert result.source == "youtube"
    assert result.songs == []
    assert result.attempts == [{"api": "jiosaavn", "status": "no_results"}]


def test_every_provider_failing_raises_one_aggregate_error(failing_fetcher):
    fetchers = {"jiosaavn": failing_fetcher("jiosaavn"), "youtube": failing_fetcher("youtube")}

    with pytest.raises(AllProvidersFailedError) as excinfo:
        asyncio.run(resolve(fetchers, ["jiosaavn", "youtube"], "trending", limit=20))

    assert excinfo.value.to_dict() == {"error": "All providers failed"}
    assert [a["api"] for a in excinfo.value.attempts] == ["jiosaavn", "youtube"]


def test_unconfigured_soundcloud_falls_back_to_youtube_songs():
    soundcloud = SoundCloudFetcher(client_id=None)
    youtube = YoutubeFetcher(ytmusic=FakeYTMusic([yt_result("abcdefghijk")]))

    result = asyncio.run(
        resolve({"soundcloud": soundcloud, "youtube": youtube}, ["soundcloud", "youtube"], "search", "lofi", limit=20)
    )

    assert result.source == "youtube"
    assert all(song["type"] == "youtube" for song in result.songs)
    assert result.attempts[0]["error"] == ConfigurationError.__name__
