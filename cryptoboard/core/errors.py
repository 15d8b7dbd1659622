"""Domain errors raised by the store, the price source and the services."""


class CryptoBoardError(Exception):
    """Base class for all application errors."""


class NotFoundError(CryptoBoardError):
    """No data exists for the requested symbol."""

    def __init__(self, symbol: str, reason: str = "no data"):
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"{symbol}: {reason}")


class SourceUnavailableError(CryptoBoardError):
    """The external price source is unconfigured, unreachable, rate limited or timed out."""


class StoreUnavailableError(CryptoBoardError):
    """The snapshot store could not be reached or the query failed."""
