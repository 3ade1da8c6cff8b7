"""
Error taxonomy of the PUBG API client.

Every failed call surfaces exactly one of these; nothing is swallowed.
"""


class PubgApiError(Exception):
    """Base class for every failure coming out of PubgApiClient."""


class NotFoundError(PubgApiError):
    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(f"Not found: {detail}" if detail else "Not found")


class UnauthorizedError(PubgApiError):
    def __init__(self):
        super().__init__("Unauthorized: Invalid API key")


class RateLimitedError(PubgApiError):
    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(
            f"Rate limit exceeded, retry after {retry_after} seconds"
        )


class ServerError(PubgApiError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Server error: {detail}")


class NetworkError(PubgApiError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Network error: {detail}")
