"""Error taxonomy for the catalog refresh pipeline.

Every failure raised by clients, parsers, the store or the notifier
derives from MarqueeError so callers can isolate failures per scope.
"""


class MarqueeError(Exception):
    """Base exception for pipeline errors."""

    pass


class ExternalFetchError(MarqueeError):
    """Raised when a provider is unreachable or answers with an error."""

    pass


class TMDBNotFoundError(ExternalFetchError):
    """Raised when a catalog resource is not found."""

    pass


class RateLimitError(ExternalFetchError):
    """Raised when a provider rate limit is exceeded."""

    pass


class ParseError(MarqueeError):
    """Raised when a provider payload or field is malformed."""

    pass


class ConflictError(MarqueeError):
    """Raised on a duplicate-key race during an upsert."""

    pass


class PersistenceError(MarqueeError):
    """Raised when a store write fails."""

    pass


class NotifierError(MarqueeError):
    """Raised when an alert dispatch fails."""

    pass


class ServiceUnavailableError(ExternalFetchError):
    """Raised when a provider answers with a 5xx status."""

    pass
