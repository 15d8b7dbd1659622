"""Symbol and price validation rules."""

from __future__ import annotations

from typing import Optional

# Symbols the price lookup accepts; anything else is answered with "not found"
SUPPORTED_SYMBOLS = frozenset({"BTC", "ETH", "ADA", "SOL", "DOT", "LINK", "XRP"})

MIN_VALID_PRICE = 0.0
MAX_VALID_PRICE = 1_000_000.0


def normalize_symbol(symbol: Optional[str]) -> str:
    if symbol is None:
        return ""
    return symbol.strip().upper()


def is_supported_symbol(symbol: Optional[str]) -> bool:
    normalized = normalize_symbol(symbol)
    return bool(normalized) and normalized in SUPPORTED_SYMBOLS


def is_valid_price(price: Optional[float]) -> bool:
    if price is None:
        return False
    return MIN_VALID_PRICE <= price <= MAX_VALID_PRICE
