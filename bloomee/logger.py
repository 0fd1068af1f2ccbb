import logging

from bloomee import config

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

_configured = False


def _level(name) -> int:
    """Map a level name to its number; unknown names fall back to INFO."""
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _configure_root():
    """Attach a single stream handler to the `bloomee` logger hierarchy."""
    global _configured
    if _configured:
        return
    root = logging.getLogger("bloomee")
    root.setLevel(_level(config.LOG_LEVEL))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
        root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    _configure_root()
    if name == "bloomee" or name.startswith("bloomee."):
        return logging.getLogger(name)
    return logging.getLogger(f"bloomee.{name}")
