"""Custom exceptions for clearer error handling across the pipeline."""


class AuctionStatsError(Exception):
    """Base exception for all package-specific errors."""


class ConfigError(AuctionStatsError, ValueError):
    """Raised when environment or CLI configuration is invalid."""


class HistorySourceError(AuctionStatsError):
    """Raised when trade history cannot be acquired for an item."""


class TransportError(HistorySourceError):
    """Raised on network failures, non-success statuses and exhausted retries."""


class MalformedPayload(HistorySourceError):
    """Raised when a response body is not a list of trade-like objects."""


class MalformedRecord(AuctionStatsError):
    """Raised when a single raw trade cannot be normalized."""


class MalformedTimestamp(MalformedRecord):
    """Raised when a raw trade time is neither an epoch nor a date-time."""


class MalformedTrade(MalformedRecord):
    """Raised when a raw trade price or amount is missing, non-finite or non-positive."""
