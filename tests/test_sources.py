from bloomee.sources import build_fetchers
from bloomee.sources.soundcloud_fetcher import SoundCloudFetcher


def test_build_fetchers_passes_explicit_settings():
    fetchers = build_fetchers({
        "HTTP_TIMEOUT": 4.0,
        "SAAVN_API_BASE": "https://mirror.test/api/",
        "SOUNDCLOUD_CLIENT_ID": "abc",
        "SOUNDCLOUD_TIMEOUT": 6.0,
        "YOUTUBE_RESULT_LIMIT": 22,
        "PLACEHOLDER_IMAGE": "https://placeholder/x.jpg",
    })

    assert set(fetchers) == {"jiosaavn", "soundcloud", "youtube", "youtube-music"}
    assert fetchers["jiosaavn"].base_url == "https://mirror.test/api"
    assert fetchers["jiosaavn"].timeout == 4.0
    assert fetchers["soundcloud"].timeout == 6.0
    assert fetchers["soundcloud"].configured
    assert fetchers["youtube"].result_limit == 22
    assert fetchers["youtube-music"].placeholder_image == "https://placeholder/x.jpg"


def test_missing_soundcloud_credential_is_an_unconfigured_state():
    fetchers = build_fetchers({"SOUNDCLOUD_CLIENT_ID": None})

    assert isinstance(fetchers["soundcloud"], SoundCloudFetcher)
    assert fetchers["soundcloud"].configured is False
    assert fetchers["jiosaavn"].configured is True
