"""Conversions from provider payloads into the common snapshot shape."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from cryptoboard.core.validation import normalize_symbol
from cryptoboard.models.snapshot import asset_key_for
from cryptoboard.schemas.coinmarketcap import CmcCoin
from cryptoboard.schemas.market import AssetSnapshot, Tier


def safe_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def safe_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def coin_to_row(coin: CmcCoin, currency: str = "USD") -> Dict[str, Any]:
    """Column values for a new ``PriceSnapshot`` built from a CoinMarketCap coin."""
    symbol = normalize_symbol(coin.symbol)
    external_id = str(coin.id) if coin.id is not None else None
    quote = coin.quote_in(currency)

    row: Dict[str, Any] = {
        "external_id": external_id,
        "asset_key": asset_key_for(external_id, symbol),
        "symbol": symbol,
        "name": coin.name or symbol,
        "rank": safe_int(coin.cmc_rank),
        "currency": currency.upper(),
        "price": None,
        "market_cap": None,
        "volume_24h": None,
        "percent_change_1h": None,
        "percent_change_24h": None,
        "percent_change_7d": None,
    }
    if quote is not None:
        row.update(
            price=safe_float(quote.price),
            market_cap=safe_float(quote.market_cap),
            volume_24h=safe_float(quote.volume_24h),
            percent_change_1h=safe_float(quote.percent_change_1h),
            percent_change_24h=safe_float(quote.percent_change_24h),
            percent_change_7d=safe_float(quote.percent_change_7d),
        )
    return row


def coin_to_snapshot(coin: CmcCoin, currency: str = "USD", source: Tier = "live") -> AssetSnapshot:
    row = coin_to_row(coin, currency)
    row.pop("asset_key")
    return AssetSnapshot(**row, observed_at=datetime.now(timezone.utc), source=source)


def rank_sorted(assets: Iterable[AssetSnapshot], limit: int) -> List[AssetSnapshot]:
    """Ranked assets only, best rank first, at most ``limit``."""
    ranked = [asset for asset in assets if asset.rank is not None]
    ranked.sort(key=lambda asset: asset.rank)
    return ranked[:limit]


def matches_term(asset: AssetSnapshot, term: str) -> bool:
    """Case-insensitive substring match against name or symbol."""
    needle = term.strip().lower()
    return needle in (asset.name or "").lower() or needle in (asset.symbol or "").lower()
