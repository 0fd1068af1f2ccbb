"""
Error taxonomy shared by the adapters, the fallback orchestrator and the
stream resolver. The Flask error handler in `app.py` turns any
`BloomeeError` into a `{"error": ..., "details": ...}` JSON body.
"""


class BloomeeError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None, details=None, provider=None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details
        self.provider = provider

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = str(self.details)
        return body


class ValidationError(BloomeeError):
    """A required request parameter is missing or unusable."""
    status_code = 400
    message = "Invalid request"


class ConfigurationError(BloomeeError):
    """A provider is missing its credential. Recoverable: triggers fallback."""
    message = "Provider is not configured"


class ProviderError(BloomeeError):
    """Upstream HTTP, transport, timeout or parsing failure."""
    message = "Provider request failed"


class NotFoundError(BloomeeError):
    status_code = 404
    message = "Not found"


class ResolutionError(BloomeeError):
    """No playable audio-only format could be resolved."""
    message = "Failed to get stream URL"


class StreamTransportError(BloomeeError):
    """The upstream media connection failed before any byte was relayed."""
    message = "Streaming failed"


class AllProvidersFailedError(BloomeeError):
    message = "All providers failed"

    def __init__(self, attempts=None, message=None):
        super().__init__(message)
        self.attempts = attempts or []
