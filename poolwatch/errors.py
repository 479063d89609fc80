"""
Exception hierarchy for poolwatch.

Decoder and metadata errors are raised internally and converted into
results or fallbacks at the component boundary; they never reach callers
of ``decode``, ``decode_log`` or ``resolve``.
"""


class PoolwatchError(Exception):
    """Base exception for poolwatch."""
    pass


class ConfigError(PoolwatchError):
    """Exception raised for configuration-related errors."""
    pass


class DecodeError(PoolwatchError):
    """Raised when call data or log data does not match its schema."""
    pass


class MetadataError(PoolwatchError):
    """Raised when a token contract cannot be read."""
    pass


class FeedError(PoolwatchError):
    """Base exception for chain feed operations."""
    pass


class RateLimitError(FeedError):
    """Raised when rate limit is hit."""

    def __init__(self, message: str, retry_after: float = None):
        super().__init__(message)
        self.retry_after = retry_after


class NetworkError(FeedError):
    """Raised when network-related errors occur."""
    pass


class ContractError(FeedError):
    """Raised when contract-related errors occur."""
    pass


class ValidationError(FeedError):
    """Raised when input validation fails."""
    pass
