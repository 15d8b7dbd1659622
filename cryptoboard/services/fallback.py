"""Static market data served when neither the store nor the live source can answer.

Prices are deliberately round numbers; they only keep the dashboard populated.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from cryptoboard.schemas.market import AssetSnapshot

FALLBACK_ASSETS = [
    {"symbol": "BTC", "name": "Bitcoin", "price": 50000.00, "rank": 1, "percent_change_24h": 1.8},
    {"symbol": "ETH", "name": "Ethereum", "price": 3000.00, "rank": 2, "percent_change_24h": 2.4},
    {"symbol": "BNB", "name": "BNB", "price": 400.00, "rank": 3, "percent_change_24h": -0.7},
    {"symbol": "XRP", "name": "XRP", "price": 0.60, "rank": 4, "percent_change_24h": 0.9},
    {"symbol": "ADA", "name": "Cardano", "price": 1.20, "rank": 5, "percent_change_24h": -1.3},
    {"symbol": "DOGE", "name": "Dogecoin", "price": 0.30, "rank": 6, "percent_change_24h": 3.1},
    {"symbol": "SOL", "name": "Solana", "price": 100.00, "rank": 7, "percent_change_24h": 4.2},
    {"symbol": "TRX", "name": "TRON", "price": 0.08, "rank": 8, "percent_change_24h": -0.2},
    {"symbol": "TON", "name": "Toncoin", "price": 5.50, "rank": 9, "percent_change_24h": 0.5},
    {"symbol": "AVAX", "name": "Avalanche", "price": 25.00, "rank": 10, "percent_change_24h": -2.6},
]

FALLBACK_PRICES: Dict[str, float] = {asset["symbol"]: asset["price"] for asset in FALLBACK_ASSETS}


def fallback_assets(currency: str = "USD") -> List[AssetSnapshot]:
    now = datetime.now(timezone.utc)
    return [
        AssetSnapshot(
            symbol=asset["symbol"],
            name=asset["name"],
            price=asset["price"],
            rank=asset["rank"],
            percent_change_24h=asset["percent_change_24h"],
            # rough magnitudes so cards and charts have something to scale against
            volume_24h=asset["price"] * 1_000_000,
            market_cap=asset["price"] * 21_000_000,
            currency=currency,
            observed_at=now,
            source="fallback",
        )
        for asset in FALLBACK_ASSETS
    ]


def fallback_price(symbol: str) -> Optional[float]:
    return FALLBACK_PRICES.get(symbol.strip().upper())
