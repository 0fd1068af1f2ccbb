import logging

import pytest

from bloomee import config, logger


@pytest.fixture
def fresh_root(monkeypatch):
    root = logging.getLogger("bloomee")
    level = root.level
    monkeypatch.setattr(logger, "_configured", False)
    yield root
    root.setLevel(level)


@pytest.mark.parametrize("value, expected", [
    ("verbose", logging.INFO),
    ("", logging.INFO),
    ("debug", logging.DEBUG),
    (" WARNING ", logging.WARNING),
])
def test_root_level_comes_from_config(monkeypatch, fresh_root, value, expected):
    monkeypatch.setattr(config, "LOG_LEVEL", value)

    logger.get_logger("test")

    assert fresh_root.level == expected
