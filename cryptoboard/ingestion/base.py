"""Abstract price source interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from cryptoboard.schemas.coinmarketcap import CmcCoin


class BaseSource(ABC):
    """A market data provider the fallback chain can query live.

    Implementations raise ``SourceUnavailableError`` for every failure
    (missing credentials, transport errors, timeouts, rate limits).
    """

    name: str

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials are present; unconfigured sources are skipped."""

    @abstractmethod
    async def latest_listings(self, limit: int, convert: str = "USD") -> List[CmcCoin]:
        """Top ``limit`` assets by rank, quoted in ``convert``."""

    @abstractmethod
    async def latest_quote(self, symbol: str, convert: str = "USD") -> Optional[CmcCoin]:
        """Current quote for one symbol, or None when the provider does not know it."""

    async def aclose(self) -> None:
        """Release network resources held by the source."""
