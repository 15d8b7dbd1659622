"""Analytics Engine - statistics, performance and rolling series over one asset's history."""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence

from cryptoboard.core.config import ServiceConfig
from cryptoboard.core.errors import NotFoundError, StoreUnavailableError
from cryptoboard.core.logging import get_logger
from cryptoboard.core.validation import normalize_symbol
from cryptoboard.schemas.analytics import (
    AnalyticsReport,
    ChartPoint,
    DerivedSeries,
    PerformanceMetrics,
    PriceStatistics,
    SeriesPoint,
    TableRow,
)
from cryptoboard.schemas.market import AssetSnapshot
from cryptoboard.services.store import SnapshotStore

log = get_logger("analytics_service")

# Timeframe label -> number of samples, assuming one snapshot roughly every 10 minutes
TIMEFRAME_WINDOWS: Dict[str, int] = {"10m": 1, "1h": 6, "1d": 144, "1w": 1008}


def _mean_and_pstdev(values: Sequence[float]) -> tuple[float, float]:
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return mean, math.sqrt(variance)


def rolling_volatility(prices: Sequence[float], window: int) -> List[float]:
    """Coefficient of variation (percent) over each trailing window of ``window`` prices.

    One value per index ``i >= window``; an empty list when there are not enough prices.
    """
    if window <= 0:
        raise ValueError("window must be positive")

    result = []
    for i in range(window, len(prices)):
        mean, sd = _mean_and_pstdev(prices[i - window + 1 : i + 1])
        result.append(100 * sd / mean if mean != 0 else 0.0)
    return result


def rolling_percent_change(prices: Sequence[float], window: int) -> List[float]:
    """Percent change between each price and the one ``window`` samples earlier."""
    if window <= 0:
        raise ValueError("window must be positive")

    result = []
    for i in range(window, len(prices)):
        base = prices[i - window]
        result.append(100 * (prices[i] - base) / base if base != 0 else 0.0)
    return result


def window_for(timeframe: str) -> int:
    try:
        return TIMEFRAME_WINDOWS[timeframe]
    except KeyError:
        valid = ", ".join(TIMEFRAME_WINDOWS)
        raise ValueError(f"Unknown timeframe '{timeframe}'. Expected one of: {valid}") from None


class AnalyticsEngine:
    """Turns the stored history of one asset into a report for charting."""

    def __init__(self, store: Optional[SnapshotStore], config: ServiceConfig):
        self.store = store
        self.config = config

    def _history(self, symbol: str) -> List[AssetSnapshot]:
        if self.store is None:
            raise StoreUnavailableError("Database not configured")

        latest = self.store.latest_by_symbol(symbol)
        if latest is None:
            return []
        if latest.external_id:
            return self.store.history_by_external_id(latest.external_id)
        return self.store.history_by_symbol(symbol)

    async def compute_analytics(self, symbol: str, timeframe: Optional[str] = None) -> AnalyticsReport:
        """Build the analytics report for ``symbol``.

        Raises:
            ValueError: ``timeframe`` is not one of ``TIMEFRAME_WINDOWS``.
            NotFoundError: no snapshot with a price exists for the symbol.
            StoreUnavailableError: the store is absent or failed.
        """
        window = window_for(timeframe) if timeframe is not None else None
        normalized = normalize_symbol(symbol)

        history = self._history(normalized)
        if not history:
            raise NotFoundError(normalized, "no history")

        # history is newest-first
        priced = [row for row in history if row.price is not None]
        if not priced:
            raise NotFoundError(normalized, "no price data")

        newest = history[0]
        chart_rows = history[: self.config.chart_points]
        chart_data = [
            ChartPoint(
                timestamp=row.observed_at,
                price=row.price,
                volume=row.volume_24h,
                market_cap=row.market_cap,
            )
            for row in chart_rows
        ]
        table_data = [
            TableRow(
                id=row.id,
                price=row.price,
                market_cap=row.market_cap,
                volume_24h=row.volume_24h,
                percent_change_1h=row.percent_change_1h,
                percent_change_24h=row.percent_change_24h,
                percent_change_7d=row.percent_change_7d,
                timestamp=row.observed_at,
            )
            for row in history[: self.config.table_rows]
        ]

        derived = None
        if window is not None:
            derived = self._derived_series(timeframe, window, chart_rows)

        log.debug(f"Analytics for {normalized}: {len(history)} rows, {len(priced)} priced")
        return AnalyticsReport(
            symbol=newest.symbol,
            name=newest.name,
            current_price=priced[0].price,
            rank=newest.rank,
            statistics=self._statistics([row.price for row in priced]),
            performance=self._performance(priced, newest),
            chart_data=chart_data,
            table_data=table_data,
            derived=derived,
        )

    @staticmethod
    def _statistics(prices: List[float]) -> PriceStatistics:
        low, high = min(prices), max(prices)
        average, sd = _mean_and_pstdev(prices)
        return PriceStatistics(
            min=low,
            max=high,
            average=average,
            range=high - low,
            standard_deviation=sd,
            coefficient_of_variation=100 * sd / average if average != 0 else 0.0,
            sample_count=len(prices),
        )

    @staticmethod
    def _performance(priced: List[AssetSnapshot], newest: AssetSnapshot) -> PerformanceMetrics:
        latest, oldest = priced[0], priced[-1]
        absolute = latest.price - oldest.price
        percent = 100 * absolute / oldest.price if oldest.price != 0 else 0.0

        recent: Dict[str, float] = {}
        for label, value in (
            ("1h", newest.percent_change_1h),
            ("24h", newest.percent_change_24h),
            ("7d", newest.percent_change_7d),
        ):
            if value is not None:
                recent[label] = value

        return PerformanceMetrics(
            absolute_change=absolute,
            percent_change=percent,
            recent_changes=recent,
            timespan=f"From {oldest.observed_at} to {latest.observed_at}",
        )

    @staticmethod
    def _derived_series(timeframe: str, window: int, chart_rows: List[AssetSnapshot]) -> DerivedSeries:
        chronological = [row for row in reversed(chart_rows) if row.price is not None]
        prices = [row.price for row in chronological]
        stamps = [row.observed_at for row in chronological]

        volatility = rolling_volatility(prices, window)
        change = rolling_percent_change(prices, window)
        return DerivedSeries(
            timeframe=timeframe,
            window=window,
            volatility=[SeriesPoint(timestamp=stamps[window + i], value=v) for i, v in enumerate(volatility)],
            percent_change=[SeriesPoint(timestamp=stamps[window + i], value=v) for i, v in enumerate(change)],
        )
