"""API dependencies"""

from fastapi import Request

from cryptoboard.services.analytics_service import AnalyticsEngine
from cryptoboard.services.market_service import MarketDataService


def get_market_service(request: Request) -> MarketDataService:
    """Market data service built in the application lifespan."""
    return request.app.state.market_service


def get_analytics_engine(request: Request) -> AnalyticsEngine:
    """Analytics engine built in the application lifespan."""
    return request.app.state.analytics_engine
