from cryptoboard.api.routes.analytics import router as analytics_router
from cryptoboard.api.routes.crypto import router as crypto_router
from cryptoboard.api.routes.health import router as health_router
from cryptoboard.api.routes.meta import router as meta_router

__all__ = ["analytics_router", "crypto_router", "health_router", "meta_router"]
