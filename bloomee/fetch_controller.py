from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from bloomee.errors import AllProvidersFailedError, BloomeeError
from bloomee.logger import get_logger
from bloomee.utils import maybe_await

logger = get_logger("fetch_controller")


@dataclass
class ProviderResult:
    source: str
    songs: List[Dict[str, Any]]
    attempts: List[dict] = field(default_factory=list)


async def resolve(fetchers: dict, chain: Sequence[str], operation: str, *args, **kwargs) -> ProviderResult:
    """
    Fallback orchestrator.

    Walks `chain` (provider names, primary first) and calls `operation`
    ("search" or "trending") on each adapter with the same arguments.
    Any failure is logged with the provider name and the next adapter is
    tried. An empty answer from a non-final adapter also falls through; the
    final adapter's empty list is a legitimate "no results".

    Raises AllProvidersFailedError when the chain is exhausted. The
    per-provider reasons stay in the logs and on the exception's
    `attempts`; the outward message is aggregate.
    """
    attempts: List[dict] = []
    chain = list(chain)
    answered_empty = None

    for position, name in enumerate(chain):
        fetcher = fetchers.get(name)
        is_last = position == len(chain) - 1
        if fetcher is None:
            logger.warning(f"{name}: provider unavailable, skipping")
            attempts.append({"api": name, "status": "not_configured"})
            continue

        try:
            songs = await maybe_await(getattr(fetcher, operation), *args, **kwargs)
        except BloomeeError as e:
            reason = f"{e.message}: {e.details}" if e.details else e.message
            logger.warning(f"{name} {operation} failed ({type(e).__name__}): {reason}")
            attempts.append({"api": name, "status": "error", "error": type(e).__name__, "message": reason})
            continue
        except Exception as e:
            logger.exception(f"{name} {operation} raised unexpectedly: {e}")
            attempts.append({"api": name, "status": "error", "error": type(e).__name__, "message": str(e)})
            continue

        if songs or is_last:
            if attempts:
                logger.info(f"{operation} answered by fallback provider {name} after {attempts}")
            return ProviderResult(source=name, songs=songs or [], attempts=attempts)

        logger.info(f"{name} {operation} returned no results, falling back")
        attempts.append({"api": name, "status": "no_results"})
        answered_empty = answered_empty or name

    if answered_empty is not None:
        return ProviderResult(source=answered_empty, songs=[], attempts=attempts)

    logger.error(f"All providers failed for {operation} {args!r}: {attempts}")
    raise AllProvidersFailedError(attempts=attempts)
