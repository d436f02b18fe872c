"""Custom exceptions for the market data engine."""


class EngineError(Exception):
    """Base exception for market data engine errors."""
    pass


class DataError(EngineError):
    """Raised when data is missing, invalid, or insufficient."""
    pass


class UnknownSymbolError(DataError):
    """Raised when a symbol is not part of the catalog."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Unknown symbol: {symbol}")


class EmptySeriesError(DataError):
    """Raised when a statistic is requested on a series with no points."""
    pass


class ConfigError(EngineError):
    """Raised when a catalog or settings file is missing or malformed."""
    pass
