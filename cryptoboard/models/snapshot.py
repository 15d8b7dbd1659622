"""Append-only price snapshots: every sync inserts, nothing is updated in place."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cryptoboard.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def asset_key_for(external_id: str | None, symbol: str) -> str:
    """Identity used to group snapshots of one asset."""
    if external_id:
        return str(external_id)
    return f"symbol:{symbol.strip().upper()}"


class PriceSnapshot(Base):
    """One observation of an asset's market data.

    The current value of an asset is the row with the highest ``id`` for its
    ``asset_key``; its history is every row sharing that key.
    """

    __tablename__ = "price_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    external_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True, comment="Identifier assigned by the price source (e.g. CoinMarketCap id)")

    asset_key: Mapped[str] = mapped_column(String(80), nullable=False, comment="external_id, or 'symbol:<SYMBOL>' when the source gave none")

    symbol: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    market_cap: Mapped[float | None] = mapped_column(Float, nullable=True)
    volume_24h: Mapped[float | None] = mapped_column(Float, nullable=True)
    percent_change_1h: Mapped[float | None] = mapped_column(Float, nullable=True)
    percent_change_24h: Mapped[float | None] = mapped_column(Float, nullable=True)
    percent_change_7d: Mapped[float | None] = mapped_column(Float, nullable=True)

    rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="USD")

    observed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    __table_args__ = (
        Index("ix_price_snapshots_asset_key_id", "asset_key", "id"),
        Index("ix_price_snapshots_observed_at", "observed_at"),
    )
