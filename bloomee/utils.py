import inspect
import re


async def maybe_await(func, *args, **kwargs):
    """Call `func` and await the result only when it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result


def parse_positive_int(value, default: int, maximum: int | None = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < 1:
        return default
    if maximum is not None:
        number = min(number, maximum)
    return number


_CLOCK_RE = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{2})$")


def parse_clock(text) -> int:
    """'3:45' -> 225, '1:02:03' -> 3723. Anything unparsable is 0."""
    if not text:
        return 0
    m = _CLOCK_RE.match(str(text).strip())
    if not m:
        return 0
    hours, mins, secs = m.groups()
    return int(hours or 0) * 3600 + int(mins) * 60 + int(secs)
