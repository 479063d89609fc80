"""
Error classification and retry policy for the chain feed.

Feed exceptions live in ``poolwatch.errors``; this module decides which of
them (and which raw provider errors) are worth retrying, and how long to
wait before doing so.
"""

import logging
from typing import Any, Dict, Optional

from ..errors import ContractError, NetworkError, RateLimitError, ValidationError

logger = logging.getLogger(__name__)

MAX_RETRY_DELAY = 60

_TYPED_CATEGORIES = (
    (RateLimitError, "rate_limit"),
    (NetworkError, "network"),
    (ContractError, "contract"),
    (ValidationError, "validation"),
)


class ErrorHandler:
    """
    Centralized error handling for feed operations.

    Provides classification, logging, and retry decisions for errors raised
    while polling the node.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def classify_error(self, error: Exception) -> str:
        """
        Classify an error into a category for appropriate handling.

        Args:
            error: Exception to classify

        Returns:
            One of ``rate_limit``, ``network``, ``contract``, ``validation``, ``unknown``
        """
        for error_type, category in _TYPED_CATEGORIES:
            if isinstance(error, error_type):
                return category

        if isinstance(error, (ConnectionError, TimeoutError)):
            return "network"

        error_str = str(error).lower()

        if any(keyword in error_str for keyword in ["rate limit", "too many requests", "429"]):
            return "rate_limit"

        if any(keyword in error_str for keyword in ["connection", "timeout", "timed out", "network", "dns"]):
            return "network"

        if any(keyword in error_str for keyword in ["revert", "execution reverted", "out of gas"]):
            return "contract"

        if any(keyword in error_str for keyword in ["invalid", "bad request", "400"]):
            return "validation"

        return "unknown"

    def should_retry(self, error: Exception, attempt: int, max_retries: int) -> bool:
        """
        Determine if an error should trigger a retry.

        Args:
            error: Exception that occurred
            attempt: Current attempt number (0-based)
            max_retries: Maximum number of attempts allowed

        Returns:
            True if the operation should be retried
        """
        if attempt >= max_retries:
            return False

        # Validation and contract errors are deterministic
        return self.classify_error(error) in ("network", "rate_limit", "unknown")

    def get_retry_delay(self, error: Exception, attempt: int, base_delay: float = 1.0) -> float:
        """
        Exponential backoff for the given attempt, capped at 60 seconds.

        Rate-limit errors wait twice as long, or as long as the server asked
        for when it said so.
        """
        category = self.classify_error(error)
        delay = min(base_delay * 2**attempt, MAX_RETRY_DELAY)

        if category == "rate_limit":
            retry_after = getattr(error, "retry_after", None)
            if retry_after:
                return min(float(retry_after), MAX_RETRY_DELAY)
            return min(delay * 2, MAX_RETRY_DELAY)

        if category == "network":
            return delay

        return min(delay * 1.5, MAX_RETRY_DELAY)

    def log_error(self, error: Exception, context: Dict[str, Any]):
        """
        Log error with appropriate level and context.

        Args:
            error: Exception to log
            context: Additional context for logging
        """
        category = self.classify_error(error)
        log_data = {
            "error_type": type(error).__name__,
            "error_category": category,
            "error_message": str(error),
            **context,
        }
        operation = context.get("operation", "feed operation")

        if category == "validation":
            self.logger.warning(f"Validation error in {operation}: {error}", extra=log_data)
        elif category == "contract":
            self.logger.error(f"Contract call failed in {operation}: {error}", extra=log_data)
        elif category == "rate_limit":
            self.logger.info(f"Rate limit encountered in {operation}", extra=log_data)
        else:
            self.logger.warning(f"Feed error in {operation}: {error}", extra=log_data)
