from cryptoboard.models.base import Base
from cryptoboard.models.snapshot import PriceSnapshot

__all__ = [
    "Base",
    "PriceSnapshot",
]
