"""
Normalized Song Schema
======================
Every adapter hands its records through `build_song()` and `validate_song()`
before they leave the adapter, so the orchestrator and the playback client
only ever see one shape:

    {
        "id": str, "name": str, "primaryArtists": str,
        "image":       [{"quality": str, "link": str}, ...],
        "downloadUrl": [{"quality": str, "link": str}, ...],
        "duration": int (seconds), "type": str, "url": str (optional)
    }

Quality ordering
----------------
`image` and `downloadUrl` are sorted ascending by quality. Consumers take the
LAST element as the best one, so an adapter that emits them out of order
silently degrades artwork and playback quality. Ranks are parsed from the
quality label: "500x500" ranks by pixel area, "320kbps" by bitrate, and
labels without a number ("high") rank lowest while keeping their order.
"""
import re
from typing import Any, Dict, Iterable, List, Optional

from bloomee.logger import get_logger

logger = get_logger("schema")

_DIMENSIONS_RE = re.compile(r"(\d+)\s*x\s*(\d+)", re.IGNORECASE)
_NUMBER_RE = re.compile(r"(\d+(?:\.\d+)?)")

DEFAULT_PLACEHOLDER_IMAGE = "https://picsum.photos/500/500?grayscale"

_OPTIONAL_FIELDS = ("url", "album", "year", "language", "explicitContent")


def quality_rank(quality) -> float:
    if not quality:
        return 0
    text = str(quality)
    m = _DIMENSIONS_RE.search(text)
    if m:
        return int(m.group(1)) * int(m.group(2))
    m = _NUMBER_RE.search(text)
    if m:
        return float(m.group(1))
    return 0


def quality_links(entries: Optional[Iterable[Dict[str, Any]]]) -> List[Dict[str, str]]:
    """Drop link-less entries and sort the rest ascending by quality."""
    cleaned = []
    for entry in entries or []:
        if not isinstance(entry, dict):
            continue
        link = entry.get("link") or entry.get("url")
        if not link:
            continue
        cleaned.append({"quality": str(entry.get("quality") or "default"), "link": str(link)})
    # sorted() is stable, so equal ranks keep upstream order
    return sorted(cleaned, key=lambda e: quality_rank(e["quality"]))


def build_song(
    song_id,
    name,
    primary_artists,
    image,
    download_url,
    duration,
    song_type: str,
    **extra,
) -> Dict[str, Any]:
    """
    Canonical Song constructor for every adapter.
    Centralising the key names keeps the camelCase contract the client
    expects in one place.
    """
    song = {
        "id": str(song_id) if song_id is not None else "",
        "name": (name or "").strip() if isinstance(name, str) else str(name or ""),
        "primaryArtists": primary_artists or "",
        "image": image or [],
        "downloadUrl": download_url or [],
        "duration": duration,
        "type": song_type,
    }
    for key, value in extra.items():
        if value not in (None, ""):
            song[key] = value
    return song


def _coerce_duration(value) -> int:
    try:
        seconds = int(float(value))
    except (TypeError, ValueError):
        return 0
    return max(seconds, 0)


def validate_song(song: Dict[str, Any], placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE) -> Optional[Dict[str, Any]]:
    """
    Patch or reject one record at the adapter boundary.

    Returns the patched record, or None when it cannot be played or shown
    (no id, no name, or no download link).
    """
    if not isinstance(song, dict):
        return None

    song_id = str(song.get("id") or "").strip()
    name = str(song.get("name") or "").strip()
    downloads = quality_links(song.get("downloadUrl"))
    if not song_id or not name or not downloads:
        logger.warning(
            f"Dropping malformed {song.get('type', 'unknown')} record "
            f"(id={song_id!r}, name={name!r}, downloads={len(downloads)})"
        )
        return None

    images = quality_links(song.get("image"))
    if not images:
        images = [{"quality": "default", "link": placeholder_image}]

    patched = {
        "id": song_id,
        "name": name,
        "primaryArtists": str(song.get("primaryArtists") or ""),
        "image": images,
        "downloadUrl": downloads,
        "duration": _coerce_duration(song.get("duration")),
        "type": str(song.get("type") or "unknown"),
    }
    for key in _OPTIONAL_FIELDS:
        if song.get(key) not in (None, ""):
            patched[key] = song[key]
    return patched


def validate_songs(records: Iterable[Dict[str, Any]], placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE) -> List[Dict[str, Any]]:
    songs = []
    for record in records:
        song = validate_song(record, placeholder_image)
        if song is not None:
            songs.append(song)
    return songs
