"""
Domain exceptions shared by the application and infrastructure layers.
"""


class InsufficientPriceHistoryError(ValueError):
    """Raised when a price series is too short to compute returns."""


class MarketDataError(RuntimeError):
    """Raised when the market-data provider fails, is rate limited, or has no data."""


class LanguageModelError(RuntimeError):
    """Raised when the language model call fails or returns an unusable payload."""


class UnorderedPriceHistoryError(ValueError):
    """Raised when a price series is not strictly ascending by date."""
