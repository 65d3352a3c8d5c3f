"""
Shared fixtures: an in-memory SiteStore and factories for site records.
"""

from datetime import date, datetime, timedelta

import pytest

from app.errors import SiteNotFoundError, StoreError
from app.schemas import SiteData, SiteRecord
from app.stores.base import SiteStore


class InMemorySiteStore(SiteStore):
    """Dict-backed store with switches for simulating failures."""

    name = "memory"

    def __init__(self):
        self.rows = {}
        self.next_id = 1
        self.clock = datetime(2024, 1, 1, 12, 0, 0)
        self.fail_list = False
        self.fail_writes = False
        self.fail_on_chunk = None  # 1-based index of the chunk that raises
        self.chunks_committed = []

    def _tick(self):
        self.clock += timedelta(seconds=1)
        return self.clock

    def _insert(self, site: SiteData) -> int:
        now = self._tick()
        site_id = self.next_id
        self.next_id += 1
        self.rows[site_id] = SiteRecord(id=site_id, created_at=now, updated_at=now, **site.editable_fields())
        return site_id

    def list_sites(self):
        if self.fail_list:
            raise StoreError("list unavailable")
        return sorted(self.rows.values(), key=lambda r: (r.created_at, r.id), reverse=True)

    def create_site(self, site):
        if self.fail_writes:
            raise StoreError("quota exceeded")
        return self._insert(site)

    def update_site(self, site_id, site):
        if self.fail_writes:
            raise StoreError("quota exceeded")
        if site_id not in self.rows:
            raise SiteNotFoundError(site_id)
        current = self.rows[site_id]
        self.rows[site_id] = SiteRecord(id=site_id, created_at=current.created_at, updated_at=self._tick(),
                                        **site.editable_fields())

    def delete_site(self, site_id):
        if self.fail_writes:
            raise StoreError("quota exceeded")
        if site_id not in self.rows:
            raise SiteNotFoundError(site_id)
        del self.rows[site_id]

    def _commit_chunk(self, sites):
        if self.fail_on_chunk == len(self.chunks_committed) + 1:
            raise StoreError("batch commit failed")
        for site in sites:
            self._insert(site)
        self.chunks_committed.append(len(sites))


def make_site(**overrides) -> SiteData:
    fields = dict(
        site_url="https://example.com",
        status="active",
        purchase_date="2024-01-01",
        order_code="ORD-1",
        activation_date="2024-01-10",
        migration_date=None,
        renewed=False,
    )
    fields.update(overrides)
    return SiteData(**fields)


def make_record(site_id=1, **overrides) -> SiteRecord:
    site = make_site(**overrides)
    return SiteRecord(id=site_id, **site.editable_fields())


@pytest.fixture
def store():
    return InMemorySiteStore()


@pytest.fixture
def today():
    return date(2024, 6, 1)


@pytest.fixture
def csv_header():
    return "siteUrl,status,purchaseDate,orderCode,activationDate,migrationDate,renewed\n"
