"""CoinMarketCap wire schemas (listings/latest and quotes/latest)."""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel


class CmcQuote(BaseModel):
    price: Optional[float] = None
    market_cap: Optional[float] = None
    volume_24h: Optional[float] = None
    percent_change_1h: Optional[float] = None
    percent_change_24h: Optional[float] = None
    percent_change_7d: Optional[float] = None

    class Config:
        extra = "ignore"


class CmcCoin(BaseModel):
    id: Optional[int] = None
    name: str
    symbol: str
    cmc_rank: Optional[int] = None
    quote: Dict[str, CmcQuote] = {}

    class Config:
        extra = "ignore"

    def quote_in(self, currency: str) -> Optional[CmcQuote]:
        return self.quote.get(currency.upper())


class CmcStatus(BaseModel):
    error_code: Optional[int] = 0
    error_message: Optional[str] = None

    class Config:
        extra = "ignore"


class CmcListingsResponse(BaseModel):
    data: List[CmcCoin] = []
    status: Optional[CmcStatus] = None


class CmcQuotesResponse(BaseModel):
    # v1 maps symbol -> coin, v2 maps symbol -> [coins]
    data: Dict[str, Union[CmcCoin, List[CmcCoin]]] = {}
    status: Optional[CmcStatus] = None

    def coins_for(self, symbol: str) -> List[CmcCoin]:
        entry = self.data.get(symbol.upper())
        if entry is None:
            return []
        if isinstance(entry, list):
            return entry
        return [entry]
