"""Error taxonomy shared by the interview service and the HTTP layer.

Each error kind carries the HTTP status it maps to. Messages are meant to
be shown to the user as-is, so they never contain internal identifiers.
"""


class FriendlinesError(Exception):
    """Base class for every error surfaced to a caller."""

    status_code = 500
    kind = "InternalError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FriendlinesError):
    """Malformed or missing caller input."""

    status_code = 400
    kind = "ValidationError"


class Unauthorized(FriendlinesError):
    """No authenticated caller identity."""

    status_code = 401
    kind = "Unauthorized"


class NotFound(FriendlinesError):
    status_code = 404
    kind = "NotFound"


class Forbidden(FriendlinesError):
    """Caller does not own the session."""

    status_code = 403
    kind = "Forbidden"


class InvalidState(FriendlinesError):
    """Operation is not allowed in the session's current status."""

    status_code = 400
    kind = "InvalidState"


class RateLimitExceeded(FriendlinesError):
    status_code = 429
    kind = "RateLimitExceeded"

    def __init__(self, limit: int):
        super().__init__(
            f"You've reached the daily limit of {limit} interviews. Try again tomorrow!"
        )
        self.limit = limit


class ProviderError(FriendlinesError):
    """The language model call failed or returned unusable output.

    Attributes:
        upstream_status: HTTP status returned by the provider, if any
    """

    status_code = 502
    kind = "ProviderError"

    def __init__(self, message: str, upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class ProviderTimeout(ProviderError):
    status_code = 504
    kind = "ProviderTimeout"
