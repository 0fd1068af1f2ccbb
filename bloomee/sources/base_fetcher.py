import httpx
from typing import Any, Callable, Dict, List

from bloomee.errors import ConfigurationError, ProviderError
from bloomee.logger import get_logger
from bloomee.schema import DEFAULT_PLACEHOLDER_IMAGE, validate_songs

logger = get_logger("base_fetcher")

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)


# --------------------------------------------------------------------------- #
# Per-call async HTTP client. Requests share no connection state, so every
# adapter call opens its own client and closes it on exit:
#
#     async with self._client_factory(self.timeout) as client:
#         ...
# --------------------------------------------------------------------------- #
def get_http_client(timeout: float = 10.0, **kwargs) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
        headers={
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
            "Accept-Language": "en-US,en;q=0.9",
        },
        follow_redirects=True,
        **kwargs,
    )


ClientFactory = Callable[..., httpx.AsyncClient]


# --------------------------------------------------------------------------- #
# Base class
# --------------------------------------------------------------------------- #
class BaseFetcher:
    """
    Abstract provider adapter.

    Subclasses implement `search(query, page, limit)` and `trending(limit)`
    and should:
      - Call `self.require_configured()` first when they need a credential.
      - Use `self._client_factory(self.timeout)` for all HTTP calls.
      - Raise `ProviderError` on any upstream failure. No retries here;
        fallback belongs to the orchestrator.
      - Return `self.finalize(records)` so every record passes the
        schema boundary.
    """

    source_name: str = "unknown"

    def __init__(self, timeout: float = 10.0, placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE,
                 client_factory: ClientFactory | None = None):
        self.timeout = timeout
        self.placeholder_image = placeholder_image or DEFAULT_PLACEHOLDER_IMAGE
        self._client_factory = client_factory or get_http_client

    @property
    def configured(self) -> bool:
        return True

    def require_configured(self):
        if not self.configured:
            raise ConfigurationError(
                f"{self.source_name} is not configured", provider=self.source_name
            )

    def search(self, query: str, page: int = 1, limit: int = 20):
        """Override in subclass. May be sync or async."""
        raise NotImplementedError

    def trending(self, limit: int = 20):
        """Override in subclass. May be sync or async."""
        raise NotImplementedError

    def finalize(self, records) -> List[Dict[str, Any]]:
        return validate_songs(records, self.placeholder_image)

    async def get_json(self, url: str, params: dict | None = None, timeout: float | None = None) -> Any:
        """GET `url` and decode JSON, translating every failure into ProviderError."""
        try:
            async with self._client_factory(timeout or self.timeout) as client:
                resp = await client.get(url, params=params)
                resp.raise_for_status()
                return resp.json()
        except httpx.TimeoutException as e:
            raise ProviderError(
                f"{self.source_name} request timed out", details=str(e) or type(e).__name__,
                provider=self.source_name,
            ) from e
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"{self.source_name} returned HTTP {e.response.status_code}", details=str(e),
                provider=self.source_name,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(
                f"{self.source_name} request failed", details=str(e) or type(e).__name__,
                provider=self.source_name,
            ) from e
        except ValueError as e:
            raise ProviderError(
                f"{self.source_name} returned malformed JSON", details=str(e),
                provider=self.source_name,
            ) from e
