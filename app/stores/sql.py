# app/stores/sql.py
from contextlib import contextmanager
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import func

from app.errors import SiteNotFoundError, StoreError
from app.models import Site
from app.schemas import SiteData, SiteRecord
from app.stores.base import SiteStore


def _to_record(row: Site) -> SiteRecord:
    return SiteRecord(
        id=row.id,
        site_url=row.site_url,
        status=row.status,
        purchase_date=row.purchase_date,
        order_code=row.order_code,
        activation_date=row.activation_date,
        migration_date=row.migration_date,
        renewed=row.renewed,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlSiteStore(SiteStore):
    """SQLAlchemy backend (SQLite locally, PostgreSQL in production)."""

    name = "sql"

    def __init__(self, session_factory):
        self.session_factory = session_factory

    @contextmanager
    def _session(self):
        db = self.session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreError(f"Database error: {exc}") from exc
        finally:
            db.close()

    def list_sites(self) -> List[SiteRecord]:
        with self._session() as db:
            rows = db.query(Site).order_by(Site.created_at.desc(), Site.id.desc()).all()
            return [_to_record(row) for row in rows]

    def create_site(self, site: SiteData) -> int:
        with self._session() as db:
            row = Site(**site.editable_fields())
            db.add(row)
            db.commit()
            db.refresh(row)
            return row.id

    def update_site(self, site_id: int, site: SiteData) -> None:
        with self._session() as db:
            row = db.query(Site).filter(Site.id == site_id).first()
            if not row:
                raise SiteNotFoundError(site_id)
            for name, value in site.editable_fields().items():
                setattr(row, name, value)
            row.updated_at = func.now()
            db.add(row)
            db.commit()

    def delete_site(self, site_id: int) -> None:
        with self._session() as db:
            row = db.query(Site).filter(Site.id == site_id).first()
            if not row:
                raise SiteNotFoundError(site_id)
            db.delete(row)
            db.commit()

    def _commit_chunk(self, sites: List[SiteData]) -> None:
        with self._session() as db:
            db.add_all([Site(**site.editable_fields()) for site in sites])
            db.commit()
