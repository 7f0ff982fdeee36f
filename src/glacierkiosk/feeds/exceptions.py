"""
Exceptions for feed retrieval.
"""


class FeedError(Exception):
    """Base exception for feed retrieval errors."""

    pass


class FeedConnectionError(FeedError):
    """Network error or timeout while fetching a feed."""

    pass


class FeedStatusError(FeedError):
    """Feed server answered with a non-success HTTP status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
