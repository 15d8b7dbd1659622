from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel


class PriceStatistics(BaseModel):
    min: float
    max: float
    average: float
    range: float
    standard_deviation: float
    coefficient_of_variation: float
    sample_count: int


class PerformanceMetrics(BaseModel):
    absolute_change: float
    percent_change: float
    # only the horizons the latest snapshot actually carries: "1h", "24h", "7d"
    recent_changes: Dict[str, float]
    timespan: str


class ChartPoint(BaseModel):
    timestamp: datetime
    price: Optional[float] = None
    volume: Optional[float] = None
    market_cap: Optional[float] = None


class TableRow(BaseModel):
    id: Optional[int] = None
    price: Optional[float] = None
    market_cap: Optional[float] = None
    volume_24h: Optional[float] = None
    percent_change_1h: Optional[float] = None
    percent_change_24h: Optional[float] = None
    percent_change_7d: Optional[float] = None
    timestamp: datetime


class SeriesPoint(BaseModel):
    timestamp: datetime
    value: float


class DerivedSeries(BaseModel):
    timeframe: str
    window: int
    volatility: List[SeriesPoint]
    percent_change: List[SeriesPoint]


class AnalyticsReport(BaseModel):
    symbol: str
    name: str
    current_price: Optional[float] = None
    rank: Optional[int] = None
    statistics: PriceStatistics
    performance: PerformanceMetrics
    chart_data: List[ChartPoint]
    table_data: List[TableRow]
    derived: Optional[DerivedSeries] = None
