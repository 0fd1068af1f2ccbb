import importlib

from bloomee import config


def test_provider_chains_are_read_from_environment(monkeypatch):
    monkeypatch.setenv("TRENDING_PROVIDERS", " SoundCloud , youtube,, ")
    monkeypatch.setenv("YOUTUBE_RESULT_LIMIT", "40")
    monkeypatch.setenv("HTTP_TIMEOUT", "not-a-number")
    try:
        reloaded = importlib.reload(config)
        assert reloaded.TRENDING_PROVIDERS == ["soundcloud", "youtube"]
        assert reloaded.YOUTUBE_RESULT_LIMIT == 25
        assert reloaded.HTTP_TIMEOUT == 10.0
        assert reloaded.as_dict()["TRENDING_PROVIDERS"] == ["soundcloud", "youtube"]
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_soundcloud_credential_defaults_to_unset(monkeypatch):
    monkeypatch.delenv("SOUNDCLOUD_CLIENT_ID", raising=False)
    try:
        assert importlib.reload(config).SOUNDCLOUD_CLIENT_ID is None
    finally:
        monkeypatch.undo()
        importlib.reload(config)
