"""Snapshot store - every query the services need against ``price_snapshots``."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional

from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from cryptoboard.core.errors import StoreUnavailableError
from cryptoboard.core.logging import get_logger
from cryptoboard.core.validation import normalize_symbol
from cryptoboard.models.snapshot import PriceSnapshot, asset_key_for
from cryptoboard.schemas.market import AssetSnapshot

log = get_logger("store")


class SnapshotStore:
    """Append-only access to price snapshots.

    Each call opens and closes its own session, so inserts are independent
    units of work and no transaction outlives a single method. SQLAlchemy
    failures surface as ``StoreUnavailableError``.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as exc:
            session.rollback()
            log.warning(f"Store operation '{operation}' failed: {exc}")
            raise StoreUnavailableError(f"{operation} failed: {exc.__class__.__name__}") from exc
        finally:
            session.close()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    def insert(self, values: Dict[str, Any]) -> AssetSnapshot:
        """Insert one snapshot and commit it on its own."""
        row = dict(values)
        row["symbol"] = normalize_symbol(row["symbol"])
        row.setdefault("asset_key", asset_key_for(row.get("external_id"), row["symbol"]))
        with self._session("insert") as session:
            snapshot = PriceSnapshot(**row)
            session.add(snapshot)
            session.commit()
            return AssetSnapshot.model_validate(snapshot)

    def prune_history(self, asset_keys: Iterable[str], keep: int) -> int:
        """Delete all but the newest ``keep`` rows for each asset key."""
        if keep <= 0:
            return 0

        removed = 0
        with self._session("prune_history") as session:
            for key in set(asset_keys):
                cutoff = session.execute(
                    select(PriceSnapshot.id)
                    .where(PriceSnapshot.asset_key == key)
                    .order_by(PriceSnapshot.id.desc())
                    .offset(keep - 1)
                    .limit(1)
                ).scalar_one_or_none()
                if cutoff is None:
                    continue
                result = session.execute(
                    delete(PriceSnapshot).where(
                        PriceSnapshot.asset_key == key,
                        PriceSnapshot.id < cutoff,
                    )
                )
                removed += result.rowcount or 0
            session.commit()

        if removed:
            log.info(f"Pruned {removed} snapshots beyond {keep} per asset")
        return removed

    # -------------------------------------------------------------------------
    # Latest-per-asset queries
    # -------------------------------------------------------------------------
    @staticmethod
    def _latest_ids():
        return select(func.max(PriceSnapshot.id)).group_by(PriceSnapshot.asset_key)

    def latest_per_asset(self, limit: Optional[int] = None) -> List[AssetSnapshot]:
        """Newest snapshot of every ranked asset, best rank first."""
        stmt = (
            select(PriceSnapshot)
            .where(PriceSnapshot.id.in_(self._latest_ids()))
            .where(PriceSnapshot.rank.is_not(None))
            .order_by(PriceSnapshot.rank.asc(), PriceSnapshot.id.desc())
        )
        if limit:
            stmt = stmt.limit(limit)

        with self._session("latest_per_asset") as session:
            rows = session.execute(stmt).scalars().all()
            return [AssetSnapshot.model_validate(r) for r in rows]

    def latest_by_symbol(self, symbol: str) -> Optional[AssetSnapshot]:
        stmt = (
            select(PriceSnapshot)
            .where(func.upper(PriceSnapshot.symbol) == symbol.strip().upper())
            .order_by(PriceSnapshot.id.desc())
            .limit(1)
        )
        with self._session("latest_by_symbol") as session:
            row = session.execute(stmt).scalar_one_or_none()
            return AssetSnapshot.model_validate(row) if row is not None else None

    def search_latest(self, term: str) -> List[AssetSnapshot]:
        """Latest snapshots whose name or symbol contains ``term`` (case-insensitive)."""
        needle = term.strip().lower()
        stmt = (
            select(PriceSnapshot)
            .where(PriceSnapshot.id.in_(self._latest_ids()))
            .where(
                func.lower(PriceSnapshot.name).contains(needle, autoescape=True)
                | func.lower(PriceSnapshot.symbol).contains(needle, autoescape=True)
            )
            .order_by(PriceSnapshot.rank.asc().nullslast(), PriceSnapshot.symbol.asc())
        )
        with self._session("search_latest") as session:
            rows = session.execute(stmt).scalars().all()
            return [AssetSnapshot.model_validate(r) for r in rows]

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------
    def history_by_symbol(self, symbol: str) -> List[AssetSnapshot]:
        """Every snapshot for ``symbol``, newest first."""
        stmt = (
            select(PriceSnapshot)
            .where(func.upper(PriceSnapshot.symbol) == symbol.strip().upper())
            .order_by(PriceSnapshot.observed_at.desc(), PriceSnapshot.id.desc())
        )
        with self._session("history_by_symbol") as session:
            rows = session.execute(stmt).scalars().all()
            return [AssetSnapshot.model_validate(r) for r in rows]

    def history_by_external_id(self, external_id: str) -> List[AssetSnapshot]:
        """Every snapshot for a source identifier, newest first."""
        stmt = (
            select(PriceSnapshot)
            .where(PriceSnapshot.external_id == str(external_id))
            .order_by(PriceSnapshot.observed_at.desc(), PriceSnapshot.id.desc())
        )
        with self._session("history_by_external_id") as session:
            rows = session.execute(stmt).scalars().all()
            return [AssetSnapshot.model_validate(r) for r in rows]

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------
    def count(self) -> int:
        with self._session("count") as session:
            return session.execute(select(func.count()).select_from(PriceSnapshot)).scalar() or 0

    def ping(self) -> bool:
        with self._session("ping") as session:
            session.execute(text("SELECT 1"))
            return True
